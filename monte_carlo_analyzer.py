"""
蒙特卡洛分析器
"""
import math
import random
from dataclasses import dataclass
from typing import List, Dict, Optional

import numpy as np

from config import PackConfig, RoyalChallengeConfig, PackRateConfig
from simulator_core import PackSimulator
from royal_simulator import RoyalSimulator


@dataclass(frozen=True)
class SimulationResult:
    """期待值计算结果"""
    average_pulls: float
    median_pulls: int
    percentile_90: int
    average_ur_pulled: float


@dataclass(frozen=True)
class RoyalChallengeResult:
    """ロイチャレ计算结果"""
    average_pulls: float
    median_pulls: int
    percentile_90: int
    average_cost: int
    median_cost: int
    percentile_90_cost: int


def round_half_up(value: float, digits: int = 0) -> float:
    """四舍五入（0.5进位，不用银行家舍入）"""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def pull_statistics(pull_counts: List[int]) -> Dict:
    """
    统计抽数分布
    返回: {'average': 平均值, 'median': 中位数, 'percentile_90': 90%分位数}
    """
    pulls_sorted = np.sort(np.asarray(pull_counts))
    n = len(pulls_sorted)

    return {
        'average': float(np.mean(pulls_sorted)),
        'median': int(pulls_sorted[n // 2]),
        'percentile_90': int(pulls_sorted[int(n * 0.9)]),
    }


class MonteCarloAnalyzer:
    """蒙特卡洛分析器"""

    def __init__(self, iterations: Optional[int] = None, rates: Optional[PackRateConfig] = None,
                 rng: Optional[random.Random] = None, show_progress: bool = False):
        self.rates = rates or PackRateConfig()
        self.iterations = iterations
        self.rng = rng or random.Random()
        self.show_progress = show_progress

    def _report_progress(self, i: int, iterations: int):
        step = max(1, iterations // 10)
        if self.show_progress and (i + 1) % step == 0:
            print(f"进度: {i + 1}/{iterations}")

    def collect_pack_trials(self, config: PackConfig) -> List[Dict]:
        """
        期待值计算：重复试行
        返回: 每次试行的 {'pulls', 'ur_pulled'} 列表
        """
        iterations = self.iterations or self.rates.default_iterations
        simulator = PackSimulator(config, self.rates, self.rng)

        if self.show_progress:
            print(f"正在模拟开包，共 {iterations} 次...")

        results = []
        for i in range(iterations):
            self._report_progress(i, iterations)
            results.append(simulator.simulate_once())

        return results

    def collect_royal_pulls(self, config: RoyalChallengeConfig) -> List[int]:
        """
        ロイチャレ：重复试行
        返回: 每次试行的抽数列表
        """
        iterations = self.iterations or self.rates.default_royal_iterations
        simulator = RoyalSimulator(config, self.rates, self.rng)

        if self.show_progress:
            print(f"正在模拟ロイチャレ，共 {iterations} 次...")

        pull_counts = []
        for i in range(iterations):
            self._report_progress(i, iterations)
            pull_counts.append(simulator.simulate_once())

        return pull_counts

    def summarize_pack_trials(self, results: List[Dict]) -> SimulationResult:
        stats = pull_statistics([r['pulls'] for r in results])
        average_ur_pulled = float(np.mean([r['ur_pulled'] for r in results]))

        return SimulationResult(
            average_pulls=round_half_up(stats['average'], 1),
            median_pulls=stats['median'],
            percentile_90=stats['percentile_90'],
            average_ur_pulled=round_half_up(average_ur_pulled, 1),
        )

    def summarize_royal_pulls(self, pull_counts: List[int]) -> RoyalChallengeResult:
        stats = pull_statistics(pull_counts)
        cost_per_pull = self.rates.cost_per_10_pulls / 10

        return RoyalChallengeResult(
            average_pulls=round_half_up(stats['average'], 1),
            median_pulls=stats['median'],
            percentile_90=stats['percentile_90'],
            average_cost=int(round_half_up(stats['average'] * cost_per_pull)),
            median_cost=int(round_half_up(stats['median'] * cost_per_pull)),
            percentile_90_cost=int(round_half_up(stats['percentile_90'] * cost_per_pull)),
        )

    def run_simulation(self, config: PackConfig) -> SimulationResult:
        return self.summarize_pack_trials(self.collect_pack_trials(config))

    def run_royal_simulation(self, config: RoyalChallengeConfig) -> RoyalChallengeResult:
        return self.summarize_royal_pulls(self.collect_royal_pulls(config))

    def print_results(self, result: SimulationResult, config: PackConfig):
        """打印期待值计算结果"""
        total_wanted = sum(card.count for card in config.wanted_cards)

        print("\n" + "=" * 60)
        print("【期待值计算结果】")
        print("=" * 60)
        print(f"\n想要的卡: {len(config.wanted_cards)}种 / {total_wanted}张")
        print(f"  平均值: {result.average_pulls} 抽")
        print(f"  中位数: {result.median_pulls} 抽")
        print(f"  90%分位数: {result.percentile_90} 抽")
        print(f"  平均UR数: {result.average_ur_pulled} 张")
        print("\n" + "=" * 60 + "\n")

    def print_royal_results(self, result: RoyalChallengeResult, config: RoyalChallengeConfig):
        """打印ロイチャレ计算结果"""
        print("\n" + "=" * 60)
        print(f"【ロイチャレ计算结果: {config.target_card_name or '目标卡'}】")
        print("=" * 60)
        print(f"\n  平均值: {result.average_pulls} 抽 ({result.average_cost:,} 日元)")
        print(f"  中位数: {result.median_pulls} 抽 ({result.median_cost:,} 日元)")
        print(f"  90%分位数: {result.percentile_90} 抽 ({result.percentile_90_cost:,} 日元)")
        print(f"  10连费用: {self.rates.cost_per_10_pulls:,} 日元")
        print("\n" + "=" * 60 + "\n")


def run_simulation(config: PackConfig, iterations: int = 100000,
                   rng: Optional[random.Random] = None) -> SimulationResult:
    """期待值计算入口"""
    return MonteCarloAnalyzer(iterations, rng=rng).run_simulation(config)


def run_royal_simulation(config: RoyalChallengeConfig, iterations: int = 10000,
                         rng: Optional[random.Random] = None) -> RoyalChallengeResult:
    """ロイチャレ计算入口"""
    return MonteCarloAnalyzer(iterations, rng=rng).run_royal_simulation(config)
