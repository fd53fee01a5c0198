"""
核心开包模拟器（期待值计算）

セレクションパック：每抽1次UR判定，100%パック内
シークレットパック：以10连为单位，1-4张为パック外UR，5-8张为パック内UR，
                  第10包第8张20%（天井时100%）
"""
import random
from typing import Dict, Optional
from config import PackConfig, PackRateConfig, PACK_SELECTION
from pool_state import SimulationState


class PackSimulator:
    """开包模拟器"""

    def __init__(self, config: PackConfig, rates: Optional[PackRateConfig] = None,
                 rng: Optional[random.Random] = None):
        self.config = config
        self.rates = rates or PackRateConfig()
        self.rng = rng or random.Random()

    def new_state(self) -> SimulationState:
        return SimulationState(self.config.wanted_cards)

    def try_to_craft(self, state: SimulationState) -> SimulationState:
        """
        用分解点数生成还缺的卡
        按想要的卡的列表顺序，优先给第一张还缺且可生成的卡
        """
        wanted_cards = self.config.wanted_cards
        cost = self.rates.cp_to_craft_ur

        while state.cp >= cost and state.craftable_needed(wanted_cards) > 0:
            for card in wanted_cards:
                if card.disable_craft:
                    continue
                if state.needs(card):
                    state.add_copy(card)
                    state.cp -= cost
                    break

        assert state.cp >= 0, "分解点数不能为负"
        return state

    def process_pack_ur(self, state: SimulationState) -> SimulationState:
        """
        パック内UR：随机决定是哪一张
        是还缺的想要的卡则+1张，否则分解
        """
        state.ur_pulled += 1

        ur_index = self.rng.randrange(self.config.total_ur_in_pack)
        wanted_cards = self.config.wanted_cards

        if ur_index < len(wanted_cards) and state.needs(wanted_cards[ur_index]):
            state.add_copy(wanted_cards[ur_index])
        else:
            state.cp += self.rates.cp_per_dupe_ur

        return state

    def process_out_of_pack_ur(self, state: SimulationState) -> SimulationState:
        """パック外UR：一定不是想要的卡，直接分解"""
        state.ur_pulled += 1
        state.cp += self.rates.cp_per_dupe_ur
        return state

    def pull_selection_pack(self, state: SimulationState) -> SimulationState:
        """セレクションパック单抽"""
        if self.rng.random() < self.rates.selection_ur_rate_per_pull:
            state = self.process_pack_ur(state)

        return self.try_to_craft(state)

    def in_pack_ur_rate(self, card_slot: int, is_tenth_pack: bool, has_pity: bool) -> float:
        """シークレットパック パック内（5-8张）的UR概率"""
        if is_tenth_pack and card_slot == 7:
            # 第10包第8张: 20%，天井时100%
            rate = self.rates.secret_pity_rate if has_pity else self.rates.secret_10th_pack_8th_card_rate
        else:
            rate = self.rates.secret_base_ur_rate

        assert rate <= 1.0, "概率不能超过100%"
        return rate

    def pull_secret_pack(self, state: SimulationState, is_tenth_pack: bool) -> SimulationState:
        """
        シークレットパック单抽（1包8张）
        is_tenth_pack: 是否是10连中的第10包
        """
        # 1-4张: パック外UR (各2.5%)
        for _ in range(4):
            if self.rng.random() < self.rates.secret_base_ur_rate:
                state = self.process_out_of_pack_ur(state)

        # 5-8张: パック内UR
        for card_slot in range(4, 8):
            if self.rng.random() < self.in_pack_ur_rate(card_slot, is_tenth_pack, state.has_pity):
                state = self.process_pack_ur(state)

        return self.try_to_craft(state)

    def finish_trial(self, state: SimulationState, pulls: int) -> Dict:
        return {
            'pulls': pulls,
            'ur_pulled': state.ur_pulled,
            'obtained_counts': dict(state.obtained_counts),
            'cp': state.cp,
        }

    def simulate_selection_pack(self) -> Dict:
        """
        セレクションパック：抽到凑齐为止
        返回: {
            'pulls': 抽数,
            'ur_pulled': UR总数,
            'obtained_counts': 各卡获得张数,
            'cp': 剩余分解点数
        }
        """
        wanted_cards = self.config.wanted_cards
        state = self.new_state()
        pulls = 0

        while not state.is_complete(wanted_cards):
            pulls += 1
            state = self.pull_selection_pack(state)

        return self.finish_trial(state, pulls)

    def simulate_secret_pack(self) -> Dict:
        """
        シークレットパック：以10连为单位抽到凑齐为止
        每抽完都检查是否凑齐（10连中途也可以结束）
        10连中一张UR都没出（含パック外），下一个10连的第10包第8张必出UR
        返回: 同 simulate_selection_pack
        """
        wanted_cards = self.config.wanted_cards
        state = self.new_state()
        pulls = 0

        while not state.is_complete(wanted_cards):
            ur_count_before = state.ur_pulled

            for pack_index in range(10):
                if state.is_complete(wanted_cards):
                    break

                pulls += 1
                state = self.pull_secret_pack(state, is_tenth_pack=(pack_index == 9))

            # 10连没出UR，下一个10连触发天井
            state.has_pity = state.ur_pulled == ur_count_before

        return self.finish_trial(state, pulls)

    def simulate_once(self) -> Dict:
        """按卡包类型执行一次试行"""
        if self.config.pack_type == PACK_SELECTION:
            return self.simulate_selection_pack()
        return self.simulate_secret_pack()
