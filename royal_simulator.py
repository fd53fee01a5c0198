"""
ロイチャレ模拟器
计算抽到目标UR的ロイヤル加工需要多少抽

核心规则：
1. 每张UR判定加工：ロイヤル 1%，シャイン 10%，ベーシック 89%
2. 目标卡 + ロイヤル 即结束
3. 其余的卡全部分解：ロイヤル 30pt，シャイン 15pt，ベーシック 10pt
4. 可生成时，30pt生成一次，生成时也有1%概率ロイヤル
   生成出的ロイヤル视为目标卡的ロイヤル（生成时不追踪具体是哪张卡）
5. パック外UR一定不是目标卡
"""
import random
from typing import Optional
from config import (RoyalChallengeConfig, PackRateConfig, PACK_SELECTION,
                    FINISH_ROYAL, FINISH_SHINE, FINISH_BASIC)
from pool_state import RoyalSimulationState


class RoyalSimulator:
    """ロイチャレ模拟器"""

    def __init__(self, config: RoyalChallengeConfig, rates: Optional[PackRateConfig] = None,
                 rng: Optional[random.Random] = None):
        self.config = config
        self.rates = rates or PackRateConfig()
        self.rng = rng or random.Random()

    def roll_finish(self) -> str:
        """判定加工类型"""
        rand = self.rng.random()

        if rand < self.rates.royal_rate:
            return FINISH_ROYAL
        if rand < self.rates.royal_rate + self.rates.shine_rate:
            return FINISH_SHINE
        return FINISH_BASIC

    def disenchant_cp(self, finish: str) -> int:
        """分解获得的点数"""
        return {
            FINISH_ROYAL: self.rates.cp_per_royal_ur,
            FINISH_SHINE: self.rates.cp_per_shine_ur,
            FINISH_BASIC: self.rates.cp_per_basic_ur,
        }[finish]

    def is_target_card(self) -> bool:
        """パック内UR是否是目标卡"""
        return self.rng.random() < 1 / self.config.total_ur_in_pack

    def process_ur(self, state: RoyalSimulationState, is_target_card: bool) -> bool:
        """
        抽到UR时的处理
        返回: True 表示得到目标ロイヤル，试行结束
        """
        finish = self.roll_finish()

        if is_target_card and finish == FINISH_ROYAL:
            return True

        state.cp += self.disenchant_cp(finish)

        if self.config.disable_craft:
            return False

        while state.cp >= self.rates.cp_to_craft_ur:
            state.cp -= self.rates.cp_to_craft_ur

            if self.rng.random() < self.rates.royal_rate:
                return True

            # 生成的卡也判定加工，不是目标ロイヤル就再分解
            crafted_finish = self.roll_finish()
            if crafted_finish == FINISH_ROYAL:
                return True
            state.cp += self.disenchant_cp(crafted_finish)

        return False

    def simulate_selection_pack(self) -> int:
        """
        セレクションパック：抽到目标ロイヤル为止
        返回: 抽数
        """
        state = RoyalSimulationState()
        pulls = 0

        while True:
            pulls += 1

            if self.rng.random() < self.rates.selection_ur_rate_per_pull:
                if self.process_ur(state, self.is_target_card()):
                    return pulls

    def in_pack_ur_rate(self, card_slot: int, is_tenth_pack: bool, has_pity: bool) -> float:
        if is_tenth_pack and card_slot == 7:
            return self.rates.secret_pity_rate if has_pity else self.rates.secret_10th_pack_8th_card_rate
        return self.rates.secret_base_ur_rate

    def pull_secret_pack(self, state: RoyalSimulationState, is_tenth_pack: bool) -> bool:
        """
        シークレットパック单抽（1包8张）
        返回: True 表示得到目标ロイヤル
        """
        # 1-4张: パック外UR，不会是目标卡
        for _ in range(4):
            if self.rng.random() < self.rates.secret_base_ur_rate:
                state.ur_count_in_batch += 1
                if self.process_ur(state, False):
                    return True

        # 5-8张: パック内UR，可能是目标卡
        for card_slot in range(4, 8):
            if self.rng.random() < self.in_pack_ur_rate(card_slot, is_tenth_pack, state.has_pity):
                state.ur_count_in_batch += 1
                if self.process_ur(state, self.is_target_card()):
                    return True

        return False

    def simulate_secret_pack(self) -> int:
        """
        シークレットパック：以10连为单位抽到目标ロイヤル为止
        返回: 抽数
        """
        state = RoyalSimulationState()
        pulls = 0

        while True:
            state.ur_count_in_batch = 0

            for pack_index in range(10):
                pulls += 1
                if self.pull_secret_pack(state, is_tenth_pack=(pack_index == 9)):
                    return pulls

            # 10连没出UR，下一个10连触发天井
            state.has_pity = state.ur_count_in_batch == 0

    def simulate_once(self) -> int:
        """按卡包类型执行一次试行"""
        if self.config.pack_type == PACK_SELECTION:
            return self.simulate_selection_pack()
        return self.simulate_secret_pack()
