"""
单次模拟的状态类
"""
from typing import Dict, List
from config import WantedCard


class SimulationState:
    """期待值模拟的单次试行状态"""
    def __init__(self, wanted_cards: List[WantedCard]):
        self.obtained_counts: Dict[str, int] = {card.id: 0 for card in wanted_cards}  # 已获得张数
        self.cp = 0  # 分解点数
        self.ur_pulled = 0  # 抽到的UR总数（含パック外）
        self.has_pity = False  # 天井标志（每10连重新计算）

    def obtained(self, card: WantedCard) -> int:
        return self.obtained_counts.get(card.id, 0)

    def needs(self, card: WantedCard) -> bool:
        """这张卡是否还缺"""
        return self.obtained(card) < card.count

    def add_copy(self, card: WantedCard):
        self.obtained_counts[card.id] = self.obtained(card) + 1

    def is_complete(self, wanted_cards: List[WantedCard]) -> bool:
        """所有想要的卡都凑齐了"""
        return all(not self.needs(card) for card in wanted_cards)

    def craftable_needed(self, wanted_cards: List[WantedCard]) -> int:
        """可生成的卡还缺多少张"""
        return sum(max(0, card.count - self.obtained(card))
                   for card in wanted_cards if not card.disable_craft)


class RoyalSimulationState:
    """ロイチャレ的单次试行状态（只追踪点数，不追踪具体卡）"""
    def __init__(self):
        self.cp = 0  # 分解点数
        self.has_pity = False  # 天井标志
        self.ur_count_in_batch = 0  # 当前10连中的UR数
