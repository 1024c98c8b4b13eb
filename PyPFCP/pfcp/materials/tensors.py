# 文件: PyPFCP/pfcp/materials/tensors.py
"""
张量代数工具

提供积分点本构计算所需的二阶/四阶张量运算:
- 二阶张量: 迹、偏量、特征分解、旋转
- 四阶张量: 单位张量、外积、双点积、复合、求逆
- 弹性张量构造: 各向同性 (λ, μ)、立方晶系 (C11, C12, C44)
- Voigt 记号转换 (二阶应力/应变向量、四阶切线矩阵)
- Bunge 欧拉角 → 旋转张量

约定:
    二阶张量 shape (3, 3)，四阶张量 shape (3, 3, 3, 3)
    Voigt 顺序 [xx, yy, zz, yz, xz, xy]
"""

import numpy as np
import scipy.linalg
from typing import List, Sequence, Tuple


# Voigt 索引映射
VOIGT_PAIRS = ((0, 0), (1, 1), (2, 2), (1, 2), (0, 2), (0, 1))


# =============================================================================
# 二阶张量
# =============================================================================

def trace(A: np.ndarray) -> float:
    """二阶张量的迹"""
    return float(np.trace(A))


def deviatoric(A: np.ndarray) -> np.ndarray:
    """偏量部分 A' = A - tr(A)/3 * I"""
    return A - trace(A) / 3.0 * np.eye(3)


def symmetric(A: np.ndarray) -> np.ndarray:
    """对称部分 (A + A^T) / 2"""
    return 0.5 * (A + A.T)


def symmetric_eigen(A: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    对称二阶张量的特征分解

    Args:
        A: 对称张量 (3,3)

    Returns:
        eigval: 特征值 (3,)，升序
        eigvec: 正交特征向量 (3,3)，第 i 列对应 eigval[i]
    """
    eigval, eigvec = np.linalg.eigh(symmetric(A))
    return eigval, eigvec


def eigen_projectors(eigvec: np.ndarray) -> List[np.ndarray]:
    """
    由特征向量构造投影张量 P_i = v_i ⊗ v_i

    Args:
        eigvec: 特征向量矩阵 (3,3)，按列存储

    Returns:
        长度为 3 的列表，每项为 (3,3) 张量
    """
    return [np.outer(eigvec[:, i], eigvec[:, i]) for i in range(3)]


def reconstruct(eigval: np.ndarray, projectors: Sequence[np.ndarray]) -> np.ndarray:
    """谱重构 A = Σ λ_i P_i"""
    A = np.zeros((3, 3))
    for lam, P in zip(eigval, projectors):
        A += lam * P
    return A


def rotate_two(A: np.ndarray, R: np.ndarray) -> np.ndarray:
    """A' = R A R^T"""
    return R @ A @ R.T


# =============================================================================
# 四阶张量
# =============================================================================

def identity_four() -> np.ndarray:
    """四阶单位张量 I_ijkl = δ_ik δ_jl (满足 I : A = A)"""
    I = np.eye(3)
    return np.einsum('ik,jl->ijkl', I, I)


def symmetric_identity_four() -> np.ndarray:
    """对称四阶单位张量 I^s_ijkl = (δ_ik δ_jl + δ_il δ_jk) / 2"""
    I = np.eye(3)
    return 0.5 * (np.einsum('ik,jl->ijkl', I, I) + np.einsum('il,jk->ijkl', I, I))


def outer(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """二阶张量外积 (A ⊗ B)_ijkl = A_ij B_kl"""
    return np.einsum('ij,kl->ijkl', A, B)


def double_contract(C: np.ndarray, A: np.ndarray):
    """
    双点积

    - 四阶 : 二阶 → 二阶  (C : A)_ij = C_ijkl A_kl
    - 二阶 : 二阶 → 标量  A : B = A_ij B_ij
    """
    if C.ndim == 4:
        return np.einsum('ijkl,kl->ij', C, A)
    return float(np.einsum('ij,ij->', C, A))


def compose(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """四阶张量复合 (A : B)_ijkl = A_ijmn B_mnkl"""
    return np.einsum('ijmn,mnkl->ijkl', A, B)


def solve_four(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """
    求解 A : X = B

    四阶张量按 9x9 矩阵处理。B 可以是二阶张量 (3,3) 或四阶张量 (3,3,3,3)。
    """
    A9 = A.reshape(9, 9)
    if B.ndim == 2:
        return scipy.linalg.solve(A9, B.reshape(9)).reshape(3, 3)
    return scipy.linalg.solve(A9, B.reshape(9, 9)).reshape(3, 3, 3, 3)


def invert_four(A: np.ndarray) -> np.ndarray:
    """四阶张量求逆 (9x9 矩阵意义下)"""
    return scipy.linalg.inv(A.reshape(9, 9)).reshape(3, 3, 3, 3)


def minor_symmetrize(C: np.ndarray) -> np.ndarray:
    """对后两个指标对称化 C_ij(kl)"""
    return 0.5 * (C + C.transpose(0, 1, 3, 2))


def rotate_four(C: np.ndarray, R: np.ndarray) -> np.ndarray:
    """C'_ijkl = R_ip R_jq R_kr R_ls C_pqrs"""
    return np.einsum('ip,jq,kr,ls,pqrs->ijkl', R, R, R, R, C)


def norm(A: np.ndarray) -> float:
    """L2 (Frobenius) 范数"""
    return float(np.sqrt(np.sum(A * A)))


# =============================================================================
# 弹性张量构造
# =============================================================================

def isotropic_four(lam: float, mu: float) -> np.ndarray:
    """
    各向同性弹性张量

    C_ijkl = λ δ_ij δ_kl + μ (δ_ik δ_jl + δ_il δ_jk)
    """
    I = np.eye(3)
    return lam * np.einsum('ij,kl->ijkl', I, I) + 2.0 * mu * symmetric_identity_four()


def cubic_four(C11: float, C12: float, C44: float) -> np.ndarray:
    """立方晶系弹性张量 (晶体坐标系)"""
    D = np.zeros((6, 6))
    D[0, 0] = D[1, 1] = D[2, 2] = C11
    D[0, 1] = D[0, 2] = D[1, 0] = D[1, 2] = D[2, 0] = D[2, 1] = C12
    D[3, 3] = D[4, 4] = D[5, 5] = C44
    return voigt_to_four(D)


def bulk_modulus(C: np.ndarray) -> float:
    """等效体积模量 K = C_iijj / 9"""
    return float(np.einsum('iijj->', C)) / 9.0


# =============================================================================
# Voigt 转换
# =============================================================================

def four_to_voigt(C: np.ndarray) -> np.ndarray:
    """
    四阶张量 → Voigt 矩阵 (6,6)

    输出矩阵作用于工程应变 Voigt 向量 [εxx, εyy, εzz, γyz, γxz, γxy]，
    剪切列取后两个指标的对称部分，因此也适用于不具有次对称性的切线张量。
    """
    Cs = minor_symmetrize(C)
    D = np.zeros((6, 6))
    for I, (i, j) in enumerate(VOIGT_PAIRS):
        for J, (k, l) in enumerate(VOIGT_PAIRS):
            D[I, J] = Cs[i, j, k, l]
    return D


def voigt_to_four(D: np.ndarray) -> np.ndarray:
    """Voigt 矩阵 (6,6) → 具有次对称性的四阶张量"""
    C = np.zeros((3, 3, 3, 3))
    for I, (i, j) in enumerate(VOIGT_PAIRS):
        for J, (k, l) in enumerate(VOIGT_PAIRS):
            value = D[I, J]
            C[i, j, k, l] = value
            C[j, i, k, l] = value
            C[i, j, l, k] = value
            C[j, i, l, k] = value
    return C


def tensor_to_voigt(T: np.ndarray, shear_factor: float = 1.0) -> np.ndarray:
    """
    对称二阶张量 → Voigt 向量 (6,)

    应力取 shear_factor=1，工程应变取 shear_factor=2。
    """
    v = np.array([T[i, j] for i, j in VOIGT_PAIRS], dtype=float)
    v[3:] *= shear_factor
    return v


def voigt_to_tensor(v: np.ndarray, shear_factor: float = 1.0) -> np.ndarray:
    """Voigt 向量 → 对称二阶张量，剪切分量除以 shear_factor"""
    T = np.zeros((3, 3))
    for I, (i, j) in enumerate(VOIGT_PAIRS):
        value = v[I] if I < 3 else v[I] / shear_factor
        T[i, j] = T[j, i] = value
    return T


# =============================================================================
# 取向
# =============================================================================

def euler_to_rotation(angles: Sequence[float]) -> np.ndarray:
    """
    Bunge 欧拉角 (φ1, Φ, φ2) → 旋转张量 R

    Args:
        angles: 欧拉角，单位为度

    Returns:
        R: (3,3) 正交张量，将样品坐标系向量变换到晶体坐标系。
           晶体 → 样品的旋转 (crysrot) 为 R^T。
    """
    phi1, Phi, phi2 = np.radians(np.asarray(angles, dtype=float))
    c1, s1 = np.cos(phi1), np.sin(phi1)
    c, s = np.cos(Phi), np.sin(Phi)
    c2, s2 = np.cos(phi2), np.sin(phi2)

    return np.array([
        [c1*c2 - s1*s2*c,   s1*c2 + c1*s2*c,   s2*s],
        [-c1*s2 - s1*c2*c, -s1*s2 + c1*c2*c,   c2*s],
        [s1*s,             -c1*s,               c   ],
    ])
