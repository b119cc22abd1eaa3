"""
地域IDマッピングモジュール

都道府県名（日本語・英語）と Radiko の地域ID（JP1〜JP47）を相互に変換します。
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .validators import is_valid_area_id


@dataclass(frozen=True)
class RegionInfo:
    """地域情報"""
    area_id: str           # 地域ID（JP13等）
    prefecture_ja: str     # 都道府県名（日本語）
    prefecture_en: str     # 都道府県名（英語）
    region_name: str       # 地方名


# JIS都道府県コード順。インデックス+1 が地域IDの番号になる
_PREFECTURES = [
    ("北海道", "Hokkaido", "北海道"),
    ("青森県", "Aomori", "東北"), ("岩手県", "Iwate", "東北"), ("宮城県", "Miyagi", "東北"),
    ("秋田県", "Akita", "東北"), ("山形県", "Yamagata", "東北"), ("福島県", "Fukushima", "東北"),
    ("茨城県", "Ibaraki", "関東"), ("栃木県", "Tochigi", "関東"), ("群馬県", "Gunma", "関東"),
    ("埼玉県", "Saitama", "関東"), ("千葉県", "Chiba", "関東"), ("東京都", "Tokyo", "関東"),
    ("神奈川県", "Kanagawa", "関東"),
    ("新潟県", "Niigata", "中部"), ("富山県", "Toyama", "中部"), ("石川県", "Ishikawa", "中部"),
    ("福井県", "Fukui", "中部"), ("山梨県", "Yamanashi", "中部"), ("長野県", "Nagano", "中部"),
    ("岐阜県", "Gifu", "中部"), ("静岡県", "Shizuoka", "中部"), ("愛知県", "Aichi", "中部"),
    ("三重県", "Mie", "近畿"), ("滋賀県", "Shiga", "近畿"), ("京都府", "Kyoto", "近畿"),
    ("大阪府", "Osaka", "近畿"), ("兵庫県", "Hyogo", "近畿"), ("奈良県", "Nara", "近畿"),
    ("和歌山県", "Wakayama", "近畿"),
    ("鳥取県", "Tottori", "中国"), ("島根県", "Shimane", "中国"), ("岡山県", "Okayama", "中国"),
    ("広島県", "Hiroshima", "中国"), ("山口県", "Yamaguchi", "中国"),
    ("徳島県", "Tokushima", "四国"), ("香川県", "Kagawa", "四国"), ("愛媛県", "Ehime", "四国"),
    ("高知県", "Kochi", "四国"),
    ("福岡県", "Fukuoka", "九州・沖縄"), ("佐賀県", "Saga", "九州・沖縄"),
    ("長崎県", "Nagasaki", "九州・沖縄"), ("熊本県", "Kumamoto", "九州・沖縄"),
    ("大分県", "Oita", "九州・沖縄"), ("宮崎県", "Miyazaki", "九州・沖縄"),
    ("鹿児島県", "Kagoshima", "九州・沖縄"), ("沖縄県", "Okinawa", "九州・沖縄"),
]


def _short_name(prefecture_ja: str) -> str:
    """都道府県の略称（東京都 -> 東京）。北海道はそのまま"""
    if prefecture_ja == "北海道":
        return prefecture_ja
    return prefecture_ja[:-1]


def _build_name_mapping(regions: Iterable[RegionInfo]) -> Dict[str, str]:
    """日本語正式名・日本語略称・英語名（小文字化）-> 地域ID"""
    mapping = {}
    for info in regions:
        mapping[info.prefecture_ja] = info.area_id
        mapping[_short_name(info.prefecture_ja)] = info.area_id
        mapping[info.prefecture_en.lower()] = info.area_id
    return mapping


class RegionMapper:
    """地域IDマッピングクラス"""

    REGION_INFO: Dict[str, RegionInfo] = {
        f"JP{index}": RegionInfo(f"JP{index}", ja, en, region)
        for index, (ja, en, region) in enumerate(_PREFECTURES, start=1)
    }

    REGION_MAPPING: Dict[str, str] = _build_name_mapping(REGION_INFO.values())

    @classmethod
    def get_area_id(cls, prefecture: str) -> Optional[str]:
        """都道府県名から地域IDを取得（見つからなければ None）"""
        if not prefecture:
            return None
        name = prefecture.strip()
        return cls.REGION_MAPPING.get(name) or cls.REGION_MAPPING.get(name.lower())
    
    @classmethod
    def get_prefecture_name(cls, area_id: str) -> Optional[str]:
        """地域IDから都道府県名（日本語）を取得"""
        info = cls.REGION_INFO.get(area_id)
        return info.prefecture_ja if info else None
    
    @classmethod
    def get_region_info(cls, area_id: str) -> Optional[RegionInfo]:
        return cls.REGION_INFO.get(area_id)
    
    @classmethod
    def list_all_prefectures(cls) -> List[RegionInfo]:
        return list(cls.REGION_INFO.values())
    
    @classmethod
    def resolve_area_id(cls, value: str) -> str:
        """地域IDまたは都道府県名を地域IDに解決する
        
        解決できない値はそのまま返す（形式の検証は validators で行う）。
        """
        if is_valid_area_id(value):
            return value
        return cls.get_area_id(value) or value
