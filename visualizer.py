"""
数据可视化模块
用于生成开包模拟结果的图表

独立运行: python visualizer.py
需要先运行 main.py 生成 simulation_results.pkl
"""

import pickle
import os
import sys
import warnings

import matplotlib
from matplotlib import font_manager
import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np
from typing import List, Dict, Optional

from config import BakushiConfig, PackRateConfig, PACK_SELECTION
from monte_carlo_analyzer import pull_statistics
from bakushi_calculator import shortfall_curve, target_ur_probability

sns.set_style("whitegrid")
sns.set_context("paper", font_scale=1.2)

# Configure CJK fonts so labels do not render as boxes
CJK_FONTS = [
    'PingFang SC', 'Hiragino Sans GB', 'Hiragino Sans', 'Songti SC', 'STHeiti', 'SimHei',
    'Microsoft YaHei', 'Noto Sans CJK SC', 'Noto Sans CJK JP', 'Source Han Sans SC',
    'Arial Unicode MS', 'DejaVu Sans'
]


def configure_cjk_font():
    for font_name in CJK_FONTS:
        try:
            # findfont raises if the font does not exist when fallback_to_default is False
            font_manager.findfont(font_name, fallback_to_default=False)
            matplotlib.rcParams['font.sans-serif'] = [font_name]
            matplotlib.rcParams['axes.unicode_minus'] = False
            return
        except ValueError:
            continue
    warnings.warn("未找到可用的中日文字体，图表文字可能显示为方框")


configure_cjk_font()

COLORS = {
    'selection': '#1F77B4',
    'secret': '#D62728',
    'royal': '#9467BD',
    'median': '#2CA02C',
    'percentile_90': '#FF7F0E',
    'palette': ['#1F77B4', '#FF7F0E', '#2CA02C', '#D62728', '#9467BD', '#8C564B']
}

# Global visual tweaks
plt.rcParams['figure.dpi'] = 150
plt.rcParams['savefig.dpi'] = 300
plt.rcParams['axes.facecolor'] = '#f9fafb'
plt.rcParams['figure.facecolor'] = 'white'
plt.rcParams['axes.edgecolor'] = '#e5e7eb'
plt.rcParams['grid.color'] = '#e5e7eb'
plt.rcParams['grid.alpha'] = 0.8
sns.set_palette(COLORS['palette'])


def style_axes(ax):
    ax.spines['top'].set_visible(False)
    ax.spines['right'].set_visible(False)
    ax.tick_params(axis='both', labelsize=10)
    ax.grid(True, linestyle='--', linewidth=0.8, alpha=0.7)
    ax.set_axisbelow(True)


def save_figure(save_path: Optional[str], default_path: str) -> str:
    path = save_path or default_path
    plt.savefig(path, dpi=300, bbox_inches='tight')
    print(f"图表已保存至: {path}")
    plt.close()
    return path


class PackVisualizer:
    """开包结果可视化器"""

    def __init__(self):
        self.colors = COLORS

    def _mark_statistics(self, ax, pull_counts: List[int]):
        stats = pull_statistics(pull_counts)
        ax.axvline(x=stats['median'], color=self.colors['median'], linestyle='--', linewidth=1.8,
                   label=f"中位数 {stats['median']}抽")
        ax.axvline(x=stats['percentile_90'], color=self.colors['percentile_90'], linestyle='--',
                   linewidth=1.8, label=f"90%分位数 {stats['percentile_90']}抽")
        ax.axvline(x=stats['average'], color='gray', linestyle=':', linewidth=1.5,
                   label=f"平均值 {stats['average']:.1f}抽")

    def plot_pull_distribution(self, pack_trials: List[Dict], pack_type: str,
                               save_path: Optional[str] = None) -> str:
        """
        绘制凑齐想要的卡所需抽数的分布直方图
        标注中位数、90%分位数和平均值
        """
        pull_counts = [r['pulls'] for r in pack_trials]

        fig, ax = plt.subplots(figsize=(12, 6))
        style_axes(ax)

        sns.histplot(pull_counts, ax=ax, bins=min(80, max(10, len(set(pull_counts)))),
                     color=self.colors.get(pack_type, self.colors['selection']), alpha=0.75,
                     edgecolor='white', stat='probability')
        self._mark_statistics(ax, pull_counts)

        pack_name = 'セレクションパック' if pack_type == PACK_SELECTION else 'シークレットパック'
        ax.set_xlabel('抽数', fontsize=13, fontweight='bold')
        ax.set_ylabel('概率', fontsize=13, fontweight='bold')
        ax.set_title(f'凑齐所需抽数分布 - {pack_name} ({len(pull_counts)}次模拟)',
                     fontsize=15, fontweight='bold', pad=20)
        ax.legend(fontsize=11, frameon=True, shadow=True)

        sns.despine()
        plt.tight_layout()
        return save_figure(save_path, 'pull_distribution.png')

    def plot_royal_cost_distribution(self, royal_pulls: List[int], rates: PackRateConfig,
                                     target_card_name: str = '', save_path: Optional[str] = None) -> str:
        """
        绘制ロイチャレ所需抽数的累积分布（下方x轴换算为日元）
        """
        pulls_sorted = np.sort(np.asarray(royal_pulls))
        cumulative = np.arange(1, len(pulls_sorted) + 1) / len(pulls_sorted)

        fig, ax = plt.subplots(figsize=(12, 6))
        style_axes(ax)

        ax.plot(pulls_sorted, cumulative, color=self.colors['royal'], linewidth=2.5, alpha=0.9)
        ax.fill_between(pulls_sorted, 0, cumulative, color=self.colors['royal'], alpha=0.15)
        self._mark_statistics(ax, royal_pulls)

        cost_per_pull = rates.cost_per_10_pulls / 10
        secondary = ax.secondary_xaxis('top', functions=(lambda x: x * cost_per_pull,
                                                         lambda x: x / cost_per_pull))
        secondary.set_xlabel('费用（日元）', fontsize=11)

        ax.set_xlabel('抽数', fontsize=13, fontweight='bold')
        ax.set_ylabel('已获得ロイヤル的概率', fontsize=13, fontweight='bold')
        ax.set_title(f'ロイチャレ累积概率 - {target_card_name or "目标卡"} ({len(royal_pulls)}次模拟)',
                     fontsize=15, fontweight='bold', pad=30)
        ax.set_ylim(0, 1.02)
        ax.legend(fontsize=11, frameon=True, shadow=True, loc='lower right')

        sns.despine(top=False)
        plt.tight_layout()
        return save_figure(save_path, 'royal_cost_distribution.png')

    def plot_shortfall_curve(self, config: BakushiConfig, rates: PackRateConfig,
                             max_pulls: Optional[int] = None, save_path: Optional[str] = None) -> str:
        """
        绘制未达概率（爆死率）随抽数变化的曲线
        标注期待抽数和配置中的抽数
        """
        p = target_ur_probability(config.pack_type, config.total_ur_in_pack, rates)
        expected_pulls = config.target_count / p
        max_pulls = max_pulls or int(max(config.pulls, expected_pulls) * 3)
        pulls_range = np.arange(1, max_pulls + 1)
        probabilities = shortfall_curve(config, pulls_range, rates)

        fig, ax = plt.subplots(figsize=(12, 6))
        style_axes(ax)

        ax.plot(pulls_range, probabilities * 100, color=self.colors['secret'], linewidth=2.5)
        ax.axvline(x=expected_pulls, color='gray', linestyle=':', linewidth=1.5,
                   label=f'期待抽数 {expected_pulls:.0f}抽')
        ax.axvline(x=config.pulls, color=self.colors['percentile_90'], linestyle='--', linewidth=1.8,
                   label=f'{config.pulls}抽')

        ax.set_xlabel('抽数', fontsize=13, fontweight='bold')
        ax.set_ylabel('爆死率 (%)', fontsize=13, fontweight='bold')
        ax.set_title(f'目标UR不足{config.target_count}张的概率', fontsize=15, fontweight='bold', pad=20)
        ax.set_ylim(0, 102)
        ax.legend(fontsize=11, frameon=True, shadow=True)

        sns.despine()
        plt.tight_layout()
        return save_figure(save_path, 'shortfall_curve.png')

    def generate_all_plots(self, results: Dict):
        """生成所有图表"""
        print("\n正在生成图表...")
        rates = results['rates']

        self.plot_pull_distribution(results['pack_trials'], results['pack_config'].pack_type)
        self.plot_royal_cost_distribution(results['royal_pulls'], rates,
                                          results['royal_config'].target_card_name)
        self.plot_shortfall_curve(results['bakushi_config'], rates)


def load_simulation_results(file_path: str = 'simulation_results.pkl') -> dict:
    """
    加载模拟结果

    返回: {
        'pack_config': PackConfig,
        'pack_trials': List[Dict],
        'royal_config': RoyalChallengeConfig,
        'royal_pulls': List[int],
        'bakushi_config': BakushiConfig,
        'rates': PackRateConfig
    }
    """
    if not os.path.exists(file_path):
        print(f"错误: 找不到模拟结果文件 '{file_path}'")
        print("请先运行 'python main.py' 生成模拟数据")
        sys.exit(1)

    print(f"正在加载模拟结果: {file_path}")

    with open(file_path, 'rb') as f:
        results = pickle.load(f)

    print(f"✓ 成功加载数据")
    print(f"  期待值试行: {len(results['pack_trials'])} 次")
    print(f"  ロイチャレ试行: {len(results['royal_pulls'])} 次")

    return results


def main():
    """主函数：独立运行可视化模块"""
    print("=" * 60)
    print("卡包开包期待值模拟器 - 数据可视化工具")
    print("=" * 60)

    results = load_simulation_results()

    visualizer = PackVisualizer()
    visualizer.generate_all_plots(results)

    print("\n" + "=" * 60)
    print("可视化完成！")
    print("=" * 60)


if __name__ == "__main__":
    main()
