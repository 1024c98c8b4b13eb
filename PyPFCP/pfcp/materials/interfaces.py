# 文件: PyPFCP/pfcp/materials/interfaces.py
"""
材料系统核心接口定义

设计原则:
1. Material: 所有本构模型的抽象基类，定义统一的 compute_stress 接口
2. PointFields: 宿主程序传入的积分点场量 (只读)
3. StressResult: 标准化的应力计算返回值
4. Protocol: 组件接口，使用鸭子类型实现松耦合
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Protocol, Sequence, Tuple, runtime_checkable
import numpy as np


@dataclass
class PointFields:
    """
    积分点输入场量

    由宿主 (有限元框架) 在每次求值时提供，各模型只读取自己需要的字段。

    Attributes:
        F: 当前变形梯度 (3,3)
        strain: 当前力学应变张量 (3,3)
        damage: 损伤序参量 c，约定 0 <= c <= 1 (损伤模型必需)
        order_parameters: 各晶粒序参量值 (op_num,)
        element_id: 当前单元 ID (用于晶粒追踪查询)
        elasticity: 外部提供的弹性张量 (3,3,3,3)，如多晶插值结果
        crysrot: 外部提供的晶体旋转张量 (3,3)
    """
    F: Optional[np.ndarray] = None
    strain: Optional[np.ndarray] = None
    damage: Optional[float] = None
    order_parameters: Optional[Sequence[float]] = None
    element_id: int = 0
    elasticity: Optional[np.ndarray] = None
    crysrot: Optional[np.ndarray] = None

    def require(self, name: str):
        """读取必需字段，缺失时抛出 ValueError"""
        value = getattr(self, name)
        if value is None:
            raise ValueError(f"PointFields.{name} is required by this material")
        return value


@dataclass
class StressResult:
    """
    积分点本构更新的输出

    Attributes:
        stress: Voigt 顺序 [xx, yy, zz, yz, xz, xy] 的应力 (6,)
        tangent: 对工程应变的 (6,6) 切线矩阵
        state: 试探状态；调用方在整步收敛后才提交。无状态模型为 None
        is_plastic: 本步是否产生滑移
        stress_type: stress 所在构型
        properties: 按名称索引的附加量 (dstress_dc, W0p, ...)
        converged: False 时宿主应缩减 dt 重算
        iterations: 局部 Newton 迭代数
    """
    stress: np.ndarray
    tangent: np.ndarray
    state: Optional[object] = None
    is_plastic: bool = False
    stress_type: Literal['cauchy', 'pk2', 'kirchhoff'] = 'cauchy'
    properties: Dict[str, Any] = field(default_factory=dict)
    converged: bool = True
    iterations: int = 0


class Material(ABC):
    """
    积分点本构模型

    子类给出 compute_stress / create_state / stress_type 三项。
    compute_stress 只读取传入的 state，新状态放在 StressResult.state 中返回。

    Example:
        mat = MaterialFactory.create_damage_split(E=210e3, nu=0.3)
        fields = PointFields(strain=eps, damage=0.2)
        result = mat.compute_stress(fields, state=None, dt=1.0)
    """

    @abstractmethod
    def compute_stress(
        self,
        fields: PointFields,
        state: Optional[object] = None,
        dt: float = 1.0
    ) -> StressResult:
        """
        Args:
            fields: 当前步的变形梯度/应变/损伤等输入
            state: 上一收敛步的状态
            dt: 时间增量

        Returns:
            StressResult
        """
        pass

    @abstractmethod
    def create_state(self) -> Optional[object]:
        """初始状态；无历史变量的模型返回 None"""
        pass

    @property
    @abstractmethod
    def stress_type(self) -> Literal['cauchy', 'pk2', 'kirchhoff']:
        """'pk2' (中间构型) / 'cauchy' / 'kirchhoff'"""
        pass


# =============================================================================
# 组件协议 (Protocol for duck typing)
# =============================================================================

@runtime_checkable
class ElasticModel(Protocol):
    """提供 C (3,3,3,3) 与 D (6,6) 的弹性组件"""

    @property
    def C(self) -> np.ndarray:
        """四阶弹性张量 (3,3,3,3)"""
        ...

    @property
    def D(self) -> np.ndarray:
        """弹性矩阵 (6,6)"""
        ...


@runtime_checkable
class GrainDataProvider(Protocol):
    """
    晶粒数据服务协议 (外部协作者)

    - get_var_to_feature_vector(): 单元内序参量索引 → 晶粒 ID (None 表示无活动晶粒)
    - get_data(): 晶粒 ID → 晶粒数据 (弹性张量或欧拉角)
    """

    def get_var_to_feature_vector(self, element_id: int) -> Sequence[Optional[int]]:
        ...

    def get_data(self, grain_id: int):
        ...


@runtime_checkable
class SlipRateLaw(Protocol):
    """
    滑移率 (流动) 法则协议
    """

    def slip_increments(
        self, tau: np.ndarray, gss: np.ndarray, dt: float
    ) -> Tuple[np.ndarray, np.ndarray, bool]:
        """
        Args:
            tau: 各滑移系分切应力 (nss,)
            gss: 各滑移系滑移阻力 (nss,)
            dt: 时间增量

        Returns:
            (dgamma, dgamma_dtau, ok): 滑移增量、对分切应力的导数、是否在容许范围内
        """
        ...


@runtime_checkable
class SlipHardeningLaw(Protocol):
    """
    滑移阻力硬化律协议
    """

    def initial_resistance(self, nss: int) -> np.ndarray:
        ...

    def update(
        self,
        gss_old: np.ndarray,
        gss_tmp: np.ndarray,
        dgamma: np.ndarray,
        same_plane: np.ndarray,
    ) -> np.ndarray:
        ...
