# 文件: PyPFCP/pfcp/materials/grains/tracker.py
"""
晶粒数据服务 (内存实现)

晶粒追踪本身由外部框架完成，这里只实现本构计算需要的查询接口:
- get_var_to_feature_vector(element_id): 序参量索引 → 晶粒 ID (None 表示无活动晶粒)
- get_data(grain_id): 晶粒 ID → 晶粒数据

提供:
- EulerAngles: Bunge 欧拉角 (度)
- GrainDataTracker: 字典驱动的只读晶粒数据服务
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple
import numpy as np

from ..elastic.cubic import CubicElastic


@dataclass(frozen=True)
class EulerAngles:
    """
    Bunge 欧拉角 (φ1, Φ, φ2)，单位为度
    """
    phi1: float = 0.0
    Phi: float = 0.0
    phi2: float = 0.0

    def to_vector(self) -> np.ndarray:
        """转换为向量 [φ1, Φ, φ2]，用于加权平均"""
        return np.array([self.phi1, self.Phi, self.phi2], dtype=float)


def _freeze(value):
    """numpy 数组转为只读副本，其余数据原样返回"""
    if isinstance(value, np.ndarray):
        value = np.array(value, dtype=float, copy=True)
        value.flags.writeable = False
    return value


class GrainDataTracker:
    """
    只读晶粒数据服务

    数据在构造时复制并冻结，求值期间可被多个积分点并发读取。

    Attributes:
        var_to_feature: 单元 ID → 各序参量对应的晶粒 ID (或 None)
        grain_data: 晶粒 ID → 数据 (四阶弹性张量或 EulerAngles)

    Example:
        tracker = GrainDataTracker(
            var_to_feature={0: [0, None, 1]},
            grain_data={0: C_grain0, 1: C_grain1},
        )
        tracker.get_var_to_feature_vector(0)  # (0, None, 1)
    """

    def __init__(
        self,
        var_to_feature: Mapping[int, Sequence[Optional[int]]],
        grain_data: Mapping[int, Any],
    ):
        self._var_to_feature: Dict[int, Tuple[Optional[int], ...]] = {
            int(elem): tuple(None if gid is None else int(gid) for gid in grains)
            for elem, grains in var_to_feature.items()
        }
        self._grain_data = {int(gid): _freeze(data) for gid, data in grain_data.items()}

        for elem, grains in self._var_to_feature.items():
            for gid in grains:
                if gid is not None and gid not in self._grain_data:
                    raise ValueError(
                        f"Element {elem} references grain {gid} which has no data"
                    )

    def get_var_to_feature_vector(self, element_id: int) -> Tuple[Optional[int], ...]:
        """
        查询单元内的序参量 → 晶粒映射

        未登记的单元返回空序列 (没有活动晶粒)。
        """
        return self._var_to_feature.get(int(element_id), ())

    def get_data(self, grain_id: int):
        """查询晶粒数据"""
        try:
            return self._grain_data[int(grain_id)]
        except KeyError:
            raise ValueError(f"No data for grain {grain_id}") from None

    @property
    def num_grains(self) -> int:
        return len(self._grain_data)

    @classmethod
    def from_cubic(
        cls,
        cubic: CubicElastic,
        orientations: Mapping[int, EulerAngles],
        var_to_feature: Mapping[int, Sequence[Optional[int]]],
    ) -> 'GrainDataTracker':
        """
        由立方弹性常数和晶粒取向构造弹性张量服务

        每个晶粒的数据为旋转到样品坐标系后的四阶弹性张量。
        """
        grain_data = {
            gid: cubic.rotated(angles.to_vector())
            for gid, angles in orientations.items()
        }
        return cls(var_to_feature, grain_data)

    @classmethod
    def from_orientations(
        cls,
        orientations: Mapping[int, EulerAngles],
        var_to_feature: Mapping[int, Sequence[Optional[int]]],
    ) -> 'GrainDataTracker':
        """构造欧拉角服务 (晶体旋转张量来源)"""
        return cls(var_to_feature, dict(orientations))

    def __repr__(self) -> str:
        return (
            f"GrainDataTracker(elements={len(self._var_to_feature)}, "
            f"grains={len(self._grain_data)})"
        )
