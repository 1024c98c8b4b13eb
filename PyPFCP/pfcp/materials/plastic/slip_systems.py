# 文件: PyPFCP/pfcp/materials/plastic/slip_systems.py
"""
滑移系几何

提供:
- FCC_111_110: FCC 晶体 12 个 {111}<110> 滑移系 (法向, 方向)
- SlipSystems: 滑移系集合，计算旋转后的 Schmid 张量和共面矩阵
"""

import numpy as np
from typing import Optional


# 每行: 滑移面法向 (3) + 滑移方向 (3)，晶体坐标系，未归一化
FCC_111_110 = np.array([
    [ 1, 1, 1,   0, 1,-1],
    [ 1, 1, 1,  -1, 0, 1],
    [ 1, 1, 1,   1,-1, 0],
    [-1, 1, 1,   0, 1,-1],
    [-1, 1, 1,   1, 0, 1],
    [-1, 1, 1,  -1,-1, 0],
    [ 1,-1, 1,   0, 1, 1],
    [ 1,-1, 1,  -1, 0, 1],
    [ 1,-1, 1,   1, 1, 0],
    [ 1, 1,-1,   0, 1, 1],
    [ 1, 1,-1,   1, 0, 1],
    [ 1, 1,-1,  -1, 1, 0],
], dtype=float)


class SlipSystems:
    """
    滑移系集合

    Attributes:
        normals: 单位滑移面法向 (nss, 3)，晶体坐标系
        directions: 单位滑移方向 (nss, 3)，晶体坐标系
        nss: 滑移系个数
        same_plane: 共面矩阵 (nss, nss)，用于区分自硬化与潜硬化

    Example:
        ss = SlipSystems()                  # 默认 FCC
        s0 = ss.schmid_tensors(crysrot)     # (12, 3, 3)
    """

    def __init__(self, table: Optional[np.ndarray] = None):
        """
        Args:
            table: (nss, 6) 数组，每行为法向 + 方向；None 使用 FCC_111_110

        Raises:
            ValueError: 表格形状错误、向量为零或法向与方向不正交
        """
        table = FCC_111_110 if table is None else np.asarray(table, dtype=float)
        if table.ndim != 2 or table.shape[1] != 6 or table.shape[0] == 0:
            raise ValueError(f"Slip system table must have shape (nss, 6), got {table.shape}")

        normals = table[:, :3]
        directions = table[:, 3:]
        n_norm = np.linalg.norm(normals, axis=1)
        d_norm = np.linalg.norm(directions, axis=1)
        if np.any(n_norm < 1e-12) or np.any(d_norm < 1e-12):
            raise ValueError("Slip system normals and directions must be non-zero")

        self.normals = normals / n_norm[:, None]
        self.directions = directions / d_norm[:, None]

        if np.any(np.abs(np.sum(self.normals * self.directions, axis=1)) > 1e-8):
            raise ValueError("Slip directions must lie in their slip planes")

        # 法向平行 (或反平行) 即视为同一滑移面
        cosines = np.abs(self.normals @ self.normals.T)
        self.same_plane = cosines > 1.0 - 1e-8

    @property
    def nss(self) -> int:
        return self.normals.shape[0]

    def schmid_tensors(self, crysrot: np.ndarray) -> np.ndarray:
        """
        旋转后的 Schmid 张量 s0_α = (R d_α) ⊗ (R n_α)

        Args:
            crysrot: 晶体 → 样品旋转张量 (3,3)

        Returns:
            s0: (nss, 3, 3)
        """
        d = self.directions @ crysrot.T
        n = self.normals @ crysrot.T
        return np.einsum('ai,aj->aij', d, n)

    def __repr__(self) -> str:
        return f"SlipSystems(nss={self.nss})"
