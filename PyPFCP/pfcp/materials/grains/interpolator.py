# 文件: PyPFCP/pfcp/materials/grains/interpolator.py
"""
多晶弹性张量插值

由多个序参量场和晶粒数据服务构造积分点的:
1. 插值弹性张量 C = Σ h_i C_i / Σ h_i
2. 晶体旋转张量 crysrot (由加权平均欧拉角得到)
3. 弹性张量对各序参量的导数 dC/dop_i (用于 Jacobian 组装)

插值核:
    h(op)  = (1 + sin(π (op - 0.5))) / 2
    h'(op) = π cos(π (op - 0.5)) / 2
"""

from dataclasses import dataclass
from typing import List, Sequence
import numpy as np

from ..interfaces import GrainDataProvider
from ..tensors import euler_to_rotation


# 焦耳 → 电子伏特
J_TO_EV = 6.24150974e18

# 权重和下限，防止无活动晶粒时除零
WEIGHT_TOL = 1.0e-10


def interpolation_weight(op: float) -> float:
    """插值核 h(op)，op=0 → 0, op=0.5 → 0.5, op=1 → 1"""
    return (1.0 + np.sin(np.pi * (op - 0.5))) / 2.0


def interpolation_weight_derivative(op: float) -> float:
    """插值核导数 dh/dop"""
    return np.pi * np.cos(np.pi * (op - 0.5)) / 2.0


@dataclass
class PolycrystalElasticity:
    """
    插值结果

    Attributes:
        elasticity: 插值弹性张量 (3,3,3,3)
        crysrot: 晶体旋转张量 (3,3)
        d_elasticity: 各序参量导数张量列表，长度 op_num，已做单位换算
    """
    elasticity: np.ndarray
    crysrot: np.ndarray
    d_elasticity: List[np.ndarray]


class PolycrystalElasticityInterpolator:
    """
    多晶弹性张量插值器

    两个晶粒服务在构造时注入，只读使用:
    - grain_tracker: 晶粒 ID → 样品坐标系弹性张量
    - grain_tracker_crysrot: 晶粒 ID → EulerAngles

    两者的序参量 → 晶粒映射可以不同，取向平均使用后者自己的映射。

    Example:
        interp = PolycrystalElasticityInterpolator(elastic_tracker, euler_tracker, op_num=4)
        out = interp.compute([1.0, 0.0, 0.0, 0.0], element_id=12)
    """

    def __init__(
        self,
        grain_tracker: GrainDataProvider,
        grain_tracker_crysrot: GrainDataProvider,
        op_num: int,
        length_scale: float = 1.0e-9,
        pressure_scale: float = 1.0e6,
    ):
        """
        Args:
            grain_tracker: 弹性张量服务
            grain_tracker_crysrot: 欧拉角服务
            op_num: 序参量个数
            length_scale: 长度尺度 (m)
            pressure_scale: 压力尺度 (Pa)
        """
        if op_num < 1:
            raise ValueError(f"op_num must be at least 1, got {op_num}")
        if length_scale <= 0 or pressure_scale <= 0:
            raise ValueError(
                f"length_scale and pressure_scale must be positive, "
                f"got {length_scale}, {pressure_scale}"
            )
        self.grain_tracker = grain_tracker
        self.grain_tracker_crysrot = grain_tracker_crysrot
        self.op_num = int(op_num)
        self.length_scale = float(length_scale)
        self.pressure_scale = float(pressure_scale)

    @property
    def unit_factor(self) -> float:
        """XPa → eV/(xm)^3 的换算系数"""
        return J_TO_EV * self.length_scale ** 3 * self.pressure_scale

    def compute(self, order_parameters: Sequence[float], element_id: int) -> PolycrystalElasticity:
        """
        计算积分点的插值弹性张量、晶体旋转张量和导数张量

        Args:
            order_parameters: 当前序参量值 (op_num,)
            element_id: 单元 ID

        Returns:
            PolycrystalElasticity
        """
        vals = np.asarray(order_parameters, dtype=float)
        if vals.shape != (self.op_num,):
            raise ValueError(
                f"Expected {self.op_num} order parameters, got shape {vals.shape}"
            )

        op_to_grains = self.grain_tracker.get_var_to_feature_vector(element_id)
        self._check_map(op_to_grains)

        # 弹性张量插值
        elasticity = np.zeros((3, 3, 3, 3))
        sum_h = 0.0
        for op_index, grain_id in enumerate(op_to_grains):
            if grain_id is None:
                continue
            h = interpolation_weight(vals[op_index])
            elasticity += self.grain_tracker.get_data(grain_id) * h
            sum_h += h

        sum_h = max(sum_h, WEIGHT_TOL)
        elasticity /= sum_h

        crysrot = self._interpolate_orientation(vals, element_id)

        # 导数: dC/dop_i = h'(op_i) / Σh * (C_i - C)
        d_elasticity = [np.zeros((3, 3, 3, 3)) for _ in range(self.op_num)]
        factor = self.unit_factor
        for op_index, grain_id in enumerate(op_to_grains):
            if grain_id is None:
                continue
            dhdopi = interpolation_weight_derivative(vals[op_index])
            C_deriv = (self.grain_tracker.get_data(grain_id) - elasticity) * dhdopi / sum_h
            d_elasticity[op_index] = C_deriv * factor

        return PolycrystalElasticity(
            elasticity=elasticity,
            crysrot=crysrot,
            d_elasticity=d_elasticity,
        )

    def _interpolate_orientation(self, vals: np.ndarray, element_id: int) -> np.ndarray:
        """加权平均欧拉角 → 旋转张量，返回其转置"""
        op_to_grains = self.grain_tracker_crysrot.get_var_to_feature_vector(element_id)
        self._check_map(op_to_grains)

        angles = np.zeros(3)
        sum_h = 0.0
        for op_index, grain_id in enumerate(op_to_grains):
            if grain_id is None:
                continue
            h = interpolation_weight(vals[op_index])
            angles += self.grain_tracker_crysrot.get_data(grain_id).to_vector() * h
            sum_h += h

        angles /= max(sum_h, WEIGHT_TOL)
        return euler_to_rotation(angles).T

    def _check_map(self, op_to_grains) -> None:
        if len(op_to_grains) > self.op_num:
            raise ValueError(
                f"Grain map has {len(op_to_grains)} entries but op_num is {self.op_num}"
            )

    def __repr__(self) -> str:
        return (
            f"PolycrystalElasticityInterpolator(op_num={self.op_num}, "
            f"length_scale={self.length_scale:.1e}, pressure_scale={self.pressure_scale:.1e})"
        )
