"""
开包配置类
"""
from dataclasses import dataclass, field
from typing import List

# 卡包类型
PACK_SELECTION = 'selection'  # セレクションパック：100%パック内UR
PACK_SECRET = 'secret'  # シークレットパック：パック内/パック外混合，带天井
PACK_TYPES = (PACK_SELECTION, PACK_SECRET)

# 加工类型
FINISH_ROYAL = 'royal'
FINISH_SHINE = 'shine'
FINISH_BASIC = 'basic'


@dataclass
class PackRateConfig:
    """概率与分解点数配置"""
    # セレクションパック
    selection_ur_per_10_pulls: float = 2.25  # 每10连2.25张UR

    # シークレットパック
    secret_base_ur_rate: float = 0.025  # 每张卡2.5%
    secret_10th_pack_8th_card_rate: float = 0.2  # 第10包第8张 20%
    secret_pity_rate: float = 1.0  # 天井时100%
    secret_in_pack_ur_per_10_pulls: float = 1.175  # 解析模型用的近似值

    # 分解 / 生成
    cp_per_dupe_ur: int = 10  # 重复UR分解获得10pt
    cp_to_craft_ur: int = 30  # 生成UR需要30pt

    # 加工（ロイヤル / シャイン / ベーシック）
    royal_rate: float = 0.01
    shine_rate: float = 0.10
    cp_per_basic_ur: int = 10
    cp_per_shine_ur: int = 15
    cp_per_royal_ur: int = 30

    # 费用：10连 = 2000日元
    cost_per_10_pulls: int = 2000

    # 模拟次数
    default_iterations: int = 100000
    default_royal_iterations: int = 10000

    @property
    def selection_ur_rate_per_pull(self) -> float:
        """セレクションパック每抽的UR概率"""
        return self.selection_ur_per_10_pulls / 10


@dataclass
class WantedCard:
    """想要的卡"""
    id: str
    name: str
    count: int = 1  # 1-3张
    disable_craft: bool = False  # 生成不可


@dataclass
class PackConfig:
    """期待值计算配置"""
    pack_type: str
    total_ur_in_pack: int
    wanted_cards: List[WantedCard] = field(default_factory=list)


@dataclass
class RoyalChallengeConfig:
    """ロイチャレ配置（目标为卡包中随机一张UR的ロイヤル加工）"""
    pack_type: str
    total_ur_in_pack: int
    target_card_name: str = ''  # 仅用于显示
    disable_craft: bool = False


@dataclass
class BakushiConfig:
    """未达概率（爆死率）计算配置"""
    pack_type: str
    total_ur_in_pack: int
    pulls: int
    target_count: int = 1
