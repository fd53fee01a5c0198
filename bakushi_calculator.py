"""
未达概率（爆死率）计算
N抽后自然抽到的目标UR少于k张的概率，用二项分布解析计算，不跑模拟

注意：シークレットパック使用每10连1.175张パック内UR的固定近似值
  1-9包: 4张 × 2.5% = 0.1/包，共0.9
  第10包: 3张 × 2.5% + 1张 × 20% = 0.275
  合计 1.175 / 10连
该近似不考虑天井，也不含パック外UR，与シークレットパック的模拟结果有偏差属于预期
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from config import BakushiConfig, PackRateConfig, PACK_SELECTION
from monte_carlo_analyzer import round_half_up


@dataclass(frozen=True)
class BakushiResult:
    """未达概率计算结果"""
    probability: float
    probability_percent: str
    expected_pulls: int


def log_binomial(n: int, k: int) -> float:
    """对数二项系数 log C(n, k)（防止溢出）"""
    if k > n or k < 0:
        return -math.inf
    if k == 0 or k == n:
        return 0.0

    result = 0.0
    for i in range(k):
        result += math.log(n - i) - math.log(i + 1)
    return result


def binomial_cdf(n: int, k: int, p: float) -> float:
    """二项分布累积概率 P(X < k) = P(X <= k-1)"""
    if k <= 0:
        return 0.0
    if k > n:
        return 1.0
    if p == 0:
        return 1.0
    if p == 1:
        return 0.0

    log_p = math.log(p)
    log_q = math.log(1 - p)

    cdf = 0.0
    for i in range(k):
        log_prob = log_binomial(n, i) + i * log_p + (n - i) * log_q
        cdf += math.exp(log_prob)

    return min(1.0, max(0.0, cdf))


def target_ur_probability(pack_type: str, total_ur_in_pack: int,
                          rates: Optional[PackRateConfig] = None) -> float:
    """每抽抽到特定UR的概率"""
    rates = rates or PackRateConfig()

    if pack_type == PACK_SELECTION:
        return rates.selection_ur_rate_per_pull / total_ur_in_pack

    # シークレット: 只算パック内UR，近似值
    in_pack_ur_per_pull = rates.secret_in_pack_ur_per_10_pulls / 10
    return in_pack_ur_per_pull / total_ur_in_pack


def _to_exponential(value: float, digits: int) -> str:
    # 1.23e-12 形式（指数不补零）
    mantissa, exponent = f"{value:.{digits}e}".split('e')
    return f"{mantissa}e{int(exponent):+d}"


def format_probability_percent(probability: float) -> str:
    """概率转为百分比字符串，概率越小保留的位数越多"""
    percent = probability * 100

    if probability >= 0.9999999:
        return '99.99999%以上'
    if probability <= 1e-10:
        return f"{_to_exponential(percent, 2)}%"
    if probability >= 0.01:
        return f"{percent:.2f}%"
    if probability >= 0.0001:
        return f"{percent:.4f}%"
    if probability >= 0.000001:
        return f"{percent:.6f}%"
    return f"{percent:.8f}%"


def calculate_bakushi(config: BakushiConfig, rates: Optional[PackRateConfig] = None) -> BakushiResult:
    """
    计算N抽后目标UR不足k张的概率
    期待抽数 = k / p
    """
    p = target_ur_probability(config.pack_type, config.total_ur_in_pack, rates)
    probability = binomial_cdf(config.pulls, config.target_count, p)
    expected_pulls = config.target_count / p

    return BakushiResult(
        probability=probability,
        probability_percent=format_probability_percent(probability),
        expected_pulls=int(round_half_up(expected_pulls)),
    )


def shortfall_curve(config: BakushiConfig, pulls_range: Sequence[int],
                    rates: Optional[PackRateConfig] = None) -> np.ndarray:
    """
    各抽数下的未达概率曲线（用于画图）
    config.pulls 被忽略，使用 pulls_range 中的每个值
    """
    p = target_ur_probability(config.pack_type, config.total_ur_in_pack, rates)
    return np.array([binomial_cdf(int(n), config.target_count, p) for n in pulls_range])
