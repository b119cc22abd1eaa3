"""
RadikoAuthSession単体テスト

auth1 → auth2 ハンドシェイク、部分キー生成、ヘッダーのライフサイクルを
偽装HTTPセッションでテストする。
"""

import base64
import math
import unittest
from unittest.mock import patch

import requests

from radiko_recorder.auth import (
    RADIKO_AUTH_KEY, AuthState, HandshakeHeaders, RadikoAuthSession, derive_partial_key
)
from radiko_recorder.error_handler import (
    PartialKeyBoundsError, ProtocolError, SessionStateError, TransportError, ValidationError
)
from tests.utils.fakes import make_auth1_response, make_http_session, make_response


class TestDerivePartialKey(unittest.TestCase):
    """部分キー生成のテスト"""

    def test_01_先頭8バイトの部分キー(self):
        """offset=0, length=8 は認証キー先頭8バイトのBase64"""
        self.assertEqual(derive_partial_key(0, 8), 'YmNkMTUxMDc=')

    def test_02_先頭16バイトの部分キー(self):
        self.assertEqual(derive_partial_key(0, 16), 'YmNkMTUxMDczYzAzYjM1Mg==')

    def test_03_決定的で長さが4の倍数(self):
        """同じ入力には同じ出力、長さは ceil(length/3)*4"""
        key_length = len(RADIKO_AUTH_KEY)
        for offset in range(0, key_length, 7):
            for length in range(0, key_length - offset + 1, 5):
                with self.subTest(offset=offset, length=length):
                    first = derive_partial_key(offset, length)
                    self.assertEqual(first, derive_partial_key(offset, length))
                    self.assertEqual(len(first), math.ceil(length / 3) * 4)

    def test_04_末尾までの切り出し(self):
        key_length = len(RADIKO_AUTH_KEY)
        partial_key = derive_partial_key(key_length - 4, 4)
        self.assertEqual(base64.b64decode(partial_key), RADIKO_AUTH_KEY[-4:])

    def test_05_範囲外はエラー(self):
        key_length = len(RADIKO_AUTH_KEY)
        for offset, length in [(0, key_length + 1), (key_length, 1), (30, 20), (1000, 0)]:
            with self.subTest(offset=offset, length=length):
                with self.assertRaises(PartialKeyBoundsError) as cm:
                    derive_partial_key(offset, length)
                self.assertEqual(cm.exception.key_length, key_length)

    def test_06_範囲外の判定はエンコード前に行う(self):
        with patch('radiko_recorder.auth.base64.b64encode') as mock_encode:
            with self.assertRaises(PartialKeyBoundsError):
                derive_partial_key(35, 10)
        mock_encode.assert_not_called()

    def test_07_負の値はエラー(self):
        with self.assertRaises(PartialKeyBoundsError):
            derive_partial_key(-1, 4)
        with self.assertRaises(PartialKeyBoundsError):
            derive_partial_key(0, -4)

    def test_08_範囲エラーはプロトコルエラー(self):
        self.assertTrue(issubclass(PartialKeyBoundsError, ProtocolError))


class TestHandshakeHeaders(unittest.TestCase):
    """ハンドシェイクヘッダーのテスト"""

    def test_01_初期ヘッダー(self):
        headers = HandshakeHeaders(area_id='JP13').to_dict()

        self.assertEqual(headers, {
            'User-Agent': 'python3.7',
            'Accept': '*/*',
            'X-Radiko-App': 'pc_html5',
            'X-Radiko-App-Version': '0.0.1',
            'X-Radiko-User': 'dummy_user',
            'X-Radiko-Device': 'pc',
            'X-Radiko-AuthToken': '',
            'X-Radiko-Partialkey': '',
            'X-Radiko-AreaId': 'JP13',
        })

    def test_02_認証情報の設定は新しいレコードを返す(self):
        original = HandshakeHeaders(area_id='JP27')
        updated = original.with_credentials('token', 'key')

        self.assertIsNone(original.auth_token)
        self.assertFalse(original.has_credentials)
        self.assertTrue(updated.has_credentials)
        self.assertEqual(updated.to_dict()['X-Radiko-AuthToken'], 'token')
        self.assertEqual(updated.to_dict()['X-Radiko-Partialkey'], 'key')

    def test_03_認証情報は一度だけ設定できる(self):
        updated = HandshakeHeaders(area_id='JP13').with_credentials('token', 'key')
        with self.assertRaises(SessionStateError):
            updated.with_credentials('other', 'other')


class AuthSessionTestBase(unittest.TestCase):
    """time.sleep を偽装する共通セットアップ"""

    def setUp(self):
        sleep_patcher = patch('radiko_recorder.auth.time.sleep')
        self.mock_sleep = sleep_patcher.start()
        self.addCleanup(sleep_patcher.stop)


class TestRadikoAuthSessionHandshake(AuthSessionTestBase):
    """ハンドシェイク成功パターン"""

    def test_01_認証成功でヘッダーが確定する(self):
        # Given: auth1/auth2 ともに 200
        http_session = make_http_session(
            make_auth1_response('test_auth_token_12345', offset='0', length='8'),
            make_response(text='JP13,OK')
        )

        # When
        session = RadikoAuthSession('JP13', http_session=http_session)

        # Then
        self.assertEqual(session.state, AuthState.ESTABLISHED)
        self.assertTrue(session.is_established)
        self.assertEqual(session.auth_token, 'test_auth_token_12345')
        headers = session.get_authenticated_headers()
        self.assertEqual(headers['X-Radiko-AuthToken'], 'test_auth_token_12345')
        self.assertEqual(headers['X-Radiko-Partialkey'], 'YmNkMTUxMDc=')
        self.assertEqual(headers['X-Radiko-AreaId'], 'JP13')

    def test_02_auth1とauth2を順に呼び出す(self):
        http_session = make_http_session(make_auth1_response('tok'), make_response())

        RadikoAuthSession('JP13', http_session=http_session, timeout=5.0)

        self.assertEqual(http_session.get.call_count, 2)
        first, second = http_session.get.call_args_list
        self.assertEqual(first.args[0], RadikoAuthSession.AUTH1_URL)
        self.assertEqual(second.args[0], RadikoAuthSession.AUTH2_URL)
        self.assertEqual(first.kwargs['timeout'], 5.0)
        self.assertEqual(second.kwargs['timeout'], 5.0)

    def test_03_auth1は空のスロットでauth2は認証情報付きで送信(self):
        http_session = make_http_session(
            make_auth1_response('tok', offset='0', length='16'), make_response()
        )

        RadikoAuthSession('JP40', http_session=http_session)

        auth1_headers = http_session.get.call_args_list[0].kwargs['headers']
        auth2_headers = http_session.get.call_args_list[1].kwargs['headers']
        self.assertEqual(auth1_headers['X-Radiko-AuthToken'], '')
        self.assertEqual(auth1_headers['X-Radiko-Partialkey'], '')
        self.assertEqual(auth1_headers['X-Radiko-AreaId'], 'JP40')
        self.assertEqual(auth2_headers['X-Radiko-AuthToken'], 'tok')
        self.assertEqual(auth2_headers['X-Radiko-Partialkey'], 'YmNkMTUxMDczYzAzYjM1Mg==')

    def test_04_各リクエスト後に1秒待機(self):
        http_session = make_http_session(make_auth1_response(), make_response())

        RadikoAuthSession('JP13', http_session=http_session)

        self.assertEqual(self.mock_sleep.call_count, 2)
        for call in self.mock_sleep.call_args_list:
            self.assertEqual(call.args[0], 1.0)

    def test_05_レスポンスヘッダー名は大文字小文字を区別しない(self):
        http_session = make_http_session(
            make_response(headers={
                'x-radiko-authtoken': 'lower_token',
                'x-radiko-keyoffset': '2',
                'x-radiko-keylength': '3',
            }),
            make_response()
        )

        session = RadikoAuthSession('JP13', http_session=http_session)

        self.assertEqual(session.auth_token, 'lower_token')
        self.assertEqual(session.get_authenticated_headers()['X-Radiko-Partialkey'],
                         derive_partial_key(2, 3))

    def test_06_取得したヘッダーはコピー(self):
        http_session = make_http_session(make_auth1_response('tok'), make_response())
        session = RadikoAuthSession('JP13', http_session=http_session)

        headers = session.get_authenticated_headers()
        headers['X-Radiko-AuthToken'] = 'tampered'

        self.assertEqual(session.get_authenticated_headers()['X-Radiko-AuthToken'], 'tok')

    def test_07_セッションごとに独立したヘッダー(self):
        first = RadikoAuthSession('JP13', http_session=make_http_session(
            make_auth1_response('token_a', offset='0', length='8'), make_response()))
        second = RadikoAuthSession('JP27', http_session=make_http_session(
            make_auth1_response('token_b', offset='4', length='8'), make_response()))

        self.assertEqual(first.get_authenticated_headers()['X-Radiko-AuthToken'], 'token_a')
        self.assertEqual(second.get_authenticated_headers()['X-Radiko-AuthToken'], 'token_b')
        self.assertNotEqual(first.get_authenticated_headers()['X-Radiko-Partialkey'],
                            second.get_authenticated_headers()['X-Radiko-Partialkey'])


class TestRadikoAuthSessionFailures(AuthSessionTestBase):
    """ハンドシェイク失敗パターン"""

    def test_01_不正なエリアIDは通信前に失敗(self):
        http_session = make_http_session()

        for area_id in ['JP0', 'JP48', 'jp13', '']:
            with self.subTest(area_id=area_id):
                with self.assertRaises(ValidationError):
                    RadikoAuthSession(area_id, http_session=http_session)

        http_session.get.assert_not_called()
        self.mock_sleep.assert_not_called()

    def test_02_認証トークン欠落でauth2を呼ばない(self):
        http_session = make_http_session(
            make_response(headers={'X-Radiko-KeyOffset': '0', 'X-Radiko-KeyLength': '16'}),
            make_response()
        )

        with self.assertRaises(ProtocolError):
            RadikoAuthSession('JP13', http_session=http_session)

        self.assertEqual(http_session.get.call_count, 1)
        self.assertEqual(http_session.get.call_args.args[0], RadikoAuthSession.AUTH1_URL)

    def test_03_キー情報欠落はプロトコルエラー(self):
        for missing in ['X-Radiko-KeyOffset', 'X-Radiko-KeyLength']:
            headers = {
                'X-Radiko-AUTHTOKEN': 'tok',
                'X-Radiko-KeyOffset': '0',
                'X-Radiko-KeyLength': '16',
            }
            del headers[missing]
            http_session = make_http_session(make_response(headers=headers), make_response())

            with self.subTest(missing=missing):
                with self.assertRaises(ProtocolError) as cm:
                    RadikoAuthSession('JP13', http_session=http_session)
                self.assertIn(missing, cm.exception.message)
                self.assertEqual(http_session.get.call_count, 1)

    def test_04_整数でないキー情報は範囲エラーと区別される(self):
        for offset, length in [('abc', '16'), ('0', '-1'), ('1.5', '4'), ('', '4')]:
            http_session = make_http_session(
                make_auth1_response('tok', offset=offset, length=length), make_response()
            )
            with self.subTest(offset=offset, length=length):
                with self.assertRaises(ProtocolError) as cm:
                    RadikoAuthSession('JP13', http_session=http_session)
                self.assertNotIsInstance(cm.exception, PartialKeyBoundsError)

    def test_05_範囲外のキー情報は範囲エラー(self):
        http_session = make_http_session(
            make_auth1_response('tok', offset='30', length='16'), make_response()
        )

        with self.assertRaises(PartialKeyBoundsError):
            RadikoAuthSession('JP13', http_session=http_session)
        self.assertEqual(http_session.get.call_count, 1)

    def test_06_auth1の非2xxは通信エラー(self):
        http_session = make_http_session(make_response(status_code=403, text='forbidden'))

        with self.assertRaises(TransportError) as cm:
            RadikoAuthSession('JP13', http_session=http_session)

        error = cm.exception
        self.assertEqual(error.endpoint, RadikoAuthSession.AUTH1_URL)
        self.assertEqual(error.status_code, 403)
        self.assertEqual(error.body, 'forbidden')
        self.assertEqual(http_session.get.call_count, 1)
        self.mock_sleep.assert_called_once_with(1.0)

    def test_07_auth2の非2xxは通信エラー(self):
        http_session = make_http_session(
            make_auth1_response(), make_response(status_code=401, text='bad partial key')
        )

        with self.assertRaises(TransportError) as cm:
            RadikoAuthSession('JP13', http_session=http_session)

        self.assertEqual(cm.exception.endpoint, RadikoAuthSession.AUTH2_URL)
        self.assertEqual(cm.exception.status_code, 401)

    def test_08_タイムアウトは通信エラーで再試行しない(self):
        http_session = make_http_session(requests.Timeout('timed out'), make_auth1_response())

        with self.assertRaises(TransportError) as cm:
            RadikoAuthSession('JP13', http_session=http_session)

        self.assertIsNone(cm.exception.status_code)
        self.assertEqual(http_session.get.call_count, 1)
        self.mock_sleep.assert_called_once()

    def test_09_接続エラーは通信エラー(self):
        http_session = make_http_session(requests.ConnectionError('refused'))

        with self.assertRaises(TransportError):
            RadikoAuthSession('JP13', http_session=http_session)


class TestRadikoAuthSessionHttpLifecycle(AuthSessionTestBase):
    """HTTPセッションのクローズ"""

    def test_01_自前のセッションはハンドシェイク後に閉じる(self):
        http_session = make_http_session(make_auth1_response('tok'), make_response())

        with patch('radiko_recorder.auth.create_radiko_session', return_value=http_session):
            session = RadikoAuthSession('JP13')

        self.assertTrue(session.is_established)
        http_session.close.assert_called_once()

    def test_02_失敗時も自前のセッションを閉じる(self):
        http_session = make_http_session(make_response(status_code=403))

        with patch('radiko_recorder.auth.create_radiko_session', return_value=http_session):
            with self.assertRaises(TransportError):
                RadikoAuthSession('JP13')

        http_session.close.assert_called_once()

    def test_03_渡されたセッションは閉じない(self):
        http_session = make_http_session(make_auth1_response('tok'), make_response())

        RadikoAuthSession('JP13', http_session=http_session)

        http_session.close.assert_not_called()


class TestRadikoAuthSessionState(unittest.TestCase):
    """未確立セッションの利用"""

    def test_01_未確立のセッションはヘッダーを返さない(self):
        with patch.object(RadikoAuthSession, '_authenticate'):
            session = RadikoAuthSession('JP13', http_session=make_http_session())

        self.assertEqual(session.state, AuthState.UNINITIALIZED)
        with self.assertRaises(SessionStateError):
            session.get_authenticated_headers()
        with self.assertRaises(SessionStateError):
            session.auth_token


if __name__ == '__main__':
    unittest.main()
