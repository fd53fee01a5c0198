"""
卡包开包期待值模拟器 - 主程序入口

运行此文件以执行完整的计算：
1. 期待值计算：凑齐想要的卡需要多少抽（含分解/生成）
2. ロイチャレ：抽到目标UR的ロイヤル加工需要多少抽 / 多少钱
3. 爆死率：N抽后目标UR不足k张的概率（二项分布解析计算）

核心规则：
1. セレクションパック：每10连2.25张UR，100%パック内
2. シークレットパック：1-4张为パック外UR（各2.5%），5-8张为パック内UR（各2.5%）
3. シークレットパック第10包第8张UR概率20%，上一个10连没出UR时为100%（天井）
4. 重复UR分解得10pt，30pt可生成1张UR（生成不可的卡除外）
5. 生成按想要的卡的列表顺序，优先给排在前面的卡
"""
import pickle
import sys
from typing import List

from config import (PackRateConfig, WantedCard, PackConfig, RoyalChallengeConfig,
                    BakushiConfig, PACK_SELECTION, PACK_SECRET, PACK_TYPES)
from monte_carlo_analyzer import MonteCarloAnalyzer
from bakushi_calculator import calculate_bakushi


def filter_valid_cards(wanted_cards: List[WantedCard]) -> List[WantedCard]:
    """去掉没填卡名的卡"""
    return [card for card in wanted_cards if card.name.strip() != '']


def check_pack_config(config: PackConfig) -> PackConfig:
    """
    检查期待值计算配置（模拟器本身不做检查）
    不合法时抛出 ValueError
    """
    if config.pack_type not in PACK_TYPES:
        raise ValueError(f"未知的卡包类型: {config.pack_type}")
    if not config.wanted_cards:
        raise ValueError("请至少添加一张想要的卡")
    if config.total_ur_in_pack < len(config.wanted_cards):
        raise ValueError("想要的卡的种类数不能超过卡包内UR数")
    for card in config.wanted_cards:
        if card.count not in (1, 2, 3):
            raise ValueError(f"{card.name}: 张数必须是1-3")
    return config


def main():
    """主函数"""
    rates = PackRateConfig()

    print("=" * 60)
    print("卡包开包期待值模拟器")
    print("=" * 60)
    print("\n当前规则:")
    print(f"  • セレクションパック: 每10连 {rates.selection_ur_per_10_pulls} 张UR")
    print(f"  • シークレットパック: 每张 {rates.secret_base_ur_rate * 100}%，"
          f"第10包第8张 {rates.secret_10th_pack_8th_card_rate * 100}%（天井100%）")
    print(f"  • 分解: 重复UR {rates.cp_per_dupe_ur}pt，生成需要 {rates.cp_to_craft_ur}pt")
    print(f"  • 加工: ロイヤル {rates.royal_rate * 100}%，シャイン {rates.shine_rate * 100}%")
    print(f"  • 10连费用: {rates.cost_per_10_pulls:,} 日元")
    print()

    wanted_cards = [
        WantedCard(id='card-1', name='ミリアム', count=3),
        WantedCard(id='card-2', name='アーク', count=2),
        WantedCard(id='card-3', name='', count=1),
        WantedCard(id='card-4', name='ベルナデッタ', count=1, disable_craft=True),
    ]
    pack_config = PackConfig(pack_type=PACK_SECRET, total_ur_in_pack=8,
                             wanted_cards=filter_valid_cards(wanted_cards))
    royal_config = RoyalChallengeConfig(pack_type=PACK_SELECTION, total_ur_in_pack=8,
                                        target_card_name='ミリアム')
    bakushi_config = BakushiConfig(pack_type=PACK_SELECTION, total_ur_in_pack=8,
                                   pulls=100, target_count=3)

    try:
        check_pack_config(pack_config)
    except ValueError as e:
        print(f"错误: {e}")
        sys.exit(1)

    analyzer = MonteCarloAnalyzer(rates=rates, show_progress=True)

    # ========== 期待值计算 ==========
    pack_trials = analyzer.collect_pack_trials(pack_config)
    pack_result = analyzer.summarize_pack_trials(pack_trials)
    analyzer.print_results(pack_result, pack_config)

    # ========== ロイチャレ ==========
    royal_pulls = analyzer.collect_royal_pulls(royal_config)
    royal_result = analyzer.summarize_royal_pulls(royal_pulls)
    analyzer.print_royal_results(royal_result, royal_config)

    # ========== 爆死率 ==========
    bakushi_result = calculate_bakushi(bakushi_config, rates)
    print("=" * 60)
    print("【爆死率】")
    print("=" * 60)
    print(f"\n  {bakushi_config.pulls}抽后目标UR不足{bakushi_config.target_count}张的概率: "
          f"{bakushi_result.probability_percent}")
    print(f"  期待抽数: {bakushi_result.expected_pulls} 抽")

    # ========== 保存模拟结果 ==========
    print("\n" + "=" * 60)
    print("保存模拟结果")
    print("=" * 60)

    simulation_results = {
        'pack_config': pack_config,
        'pack_trials': pack_trials,
        'royal_config': royal_config,
        'royal_pulls': royal_pulls,
        'bakushi_config': bakushi_config,
        'rates': rates,
    }

    output_file = 'simulation_results.pkl'
    with open(output_file, 'wb') as f:
        pickle.dump(simulation_results, f)

    print(f"\n✓ 模拟结果已保存至: {output_file}")
    print(f"  期待值试行: {len(pack_trials)} 次，ロイチャレ试行: {len(royal_pulls)} 次")
    print(f"\n提示: 运行 'python visualizer.py' 生成可视化图表")


if __name__ == "__main__":
    main()
