# 文件: PyPFCP/pfcp/materials/damage/strain_split.py
"""
拉压分解的相场断裂应力模型

将应变按迹的正负分为体积拉伸/体积压缩部分，并与偏应变组合:
- 拉伸部分 (正体积应变 + 偏应变) 受损伤退化
- 压缩部分 (负体积应变) 不退化，损伤区在受压时不发生穿透

算法步骤:
1. 应变特征分解，构造投影张量 v_i ⊗ v_i
2. 迹分解 etr⁺ = (|etr| + etr)/2, etr⁻ = (|etr| - etr)/2
3. 体积/偏量分解
4. 退化因子 xfac = (1 - c)² + k
5. σ = xfac σ0⁺ - σ0⁻
6. 断裂驱动能 G0⁺ 及其导数
"""

from dataclasses import dataclass
from typing import Tuple
import numpy as np

from ..tensors import symmetric_eigen, eigen_projectors, reconstruct


@dataclass
class DamageSplitResult:
    """
    拉压分解计算结果

    Attributes:
        stress: 退化后的应力张量 (3,3)
        stress0pos: 未退化的拉伸应力 σ0⁺ (3,3)
        stress0neg: 未退化的压缩应力 σ0⁻ (3,3)，按正值存储
        G0_pos: 断裂驱动能 G0⁺
        dG0_pos_dstrain: dG0⁺/dε (3,3)
        dstress_dc: dσ/dc (3,3)
        eigval: 主应变 (3,)
        epos: 正主应变 (|λ_i| + λ_i)/2 (3,)
        xfac: 退化因子
    """
    stress: np.ndarray
    stress0pos: np.ndarray
    stress0neg: np.ndarray
    G0_pos: float
    dG0_pos_dstrain: np.ndarray
    dstress_dc: np.ndarray
    eigval: np.ndarray
    epos: np.ndarray
    xfac: float


def split_trace(etr: float) -> Tuple[float, float]:
    """
    迹的正负分解

    Returns:
        (etrpos, etrneg): 均非负，etrpos - etrneg = etr，至多一个非零
    """
    etrpos = (abs(etr) + etr) / 2.0
    etrneg = (abs(etr) - etr) / 2.0
    return etrpos, etrneg


class StrainSplitDamage:
    """
    各向同性弹性 + 拉压分解损伤

    Attributes:
        kdamage: 完全损伤时的残余刚度比例，必须为正

    Example:
        split = StrainSplitDamage(kdamage=1e-6)
        out = split.compute(strain, c=0.3, lam=lam, mu=mu)
        out.stress, out.G0_pos
    """

    def __init__(self, kdamage: float = 1e-6):
        if kdamage <= 0:
            raise ValueError(f"kdamage must be positive, got {kdamage}")
        self.kdamage = float(kdamage)

    def degradation(self, c: float) -> float:
        """退化因子 xfac = (1 - c)² + kdamage"""
        return (1.0 - c) ** 2 + self.kdamage

    def compute(self, strain: np.ndarray, c: float, lam: float, mu: float) -> DamageSplitResult:
        """
        计算退化应力、断裂驱动能及其导数

        Args:
            strain: 力学应变张量 (3,3)
            c: 损伤变量，调用方保证 0 <= c <= 1
            lam: Lamé 第一参数
            mu: 剪切模量

        Returns:
            DamageSplitResult
        """
        Kb = lam + 2.0 * mu / 3.0
        xfac = self.degradation(c)

        eigval, eigvec = symmetric_eigen(strain)
        etens = eigen_projectors(eigvec)

        etr = float(np.sum(eigval))
        etrpos, etrneg = split_trace(etr)

        I = np.eye(3)
        total_strain = reconstruct(eigval, etens)
        vol_strain = etr / 3.0 * I
        vol_strain_pos = etrpos / 3.0 * I
        vol_strain_neg = etrneg / 3.0 * I
        dev_strain = total_strain - vol_strain

        stress0pos = 3.0 * Kb * vol_strain_pos + 2.0 * mu * dev_strain
        stress0neg = 3.0 * Kb * vol_strain_neg

        # 损伤只作用于拉伸部分
        stress = stress0pos * xfac - stress0neg

        epos = (np.abs(eigval) + eigval) / 2.0

        val = mu * float(np.einsum('ij,ji->', dev_strain, dev_strain))
        G0_pos = Kb * etrpos ** 2 / 2.0 + val

        return DamageSplitResult(
            stress=stress,
            stress0pos=stress0pos,
            stress0neg=stress0neg,
            G0_pos=G0_pos,
            dG0_pos_dstrain=stress0pos.copy(),
            dstress_dc=-stress0pos * (2.0 * (1.0 - c)),
            eigval=eigval,
            epos=epos,
            xfac=xfac,
        )

    def __repr__(self) -> str:
        return f"StrainSplitDamage(kdamage={self.kdamage:.1e})"
