# 文件: PyPFCP/pfcp/materials/factory.py
"""
材料工厂模块

提供统一的材料创建入口。所有参数检查在此完成，配置错误在求值之前以
ValueError 抛出。
"""

from typing import Any, Dict, Optional, Sequence

from .interfaces import Material, GrainDataProvider
from .elastic.isotropic import IsotropicElastic
from .elastic.cubic import CubicElastic
from .plastic.slip_systems import SlipSystems
from .plastic.flow_rule import PowerLawSlip
from .plastic.hardening import SaturationHardening
from .grains.interpolator import PolycrystalElasticityInterpolator
from .models.crystal_plasticity import CrystalPlasticityW0p, CrystalPlasticitySettings
from .models.damage_split import DamageSplitElasticMaterial
from .models.polycrystal_elastic import PolycrystalElasticMaterial


class MaterialFactory:
    """
    材料工厂

    根据材料属性字典创建对应的材料对象。
    提供便捷的工厂方法简化常见材料的创建。

    Example:
        # 从属性字典创建
        mat = MaterialFactory.create('Cu', {
            'type': 'crystal_plasticity',
            'elastic': {'C11': 168.4e3, 'C12': 121.4e3, 'C44': 75.4e3},
            'flow': {'a0': 0.001, 'xm': 0.1},
            'hardening': {'r': 1.0, 'h0': 541.5, 'tau_init': 60.8, 'tau_sat': 109.8},
            'C0': 0.1, 'C1': 0.05,
        })

        # 使用便捷方法
        mat = MaterialFactory.create_damage_split(E=210e3, nu=0.3, kdamage=1e-6)
    """

    TYPES = ('crystal_plasticity', 'damage_split', 'polycrystal_elastic')

    @staticmethod
    def create(name: str, props: Dict[str, Any]) -> Material:
        """
        根据属性字典创建材料

        Args:
            name: 材料名称 (用于错误消息)
            props: 材料属性字典，结构:
                {
                    'type': 'crystal_plasticity' | 'damage_split' | 'polycrystal_elastic',
                    ...  # 各类型参数，见对应 create_* 方法
                }

        Returns:
            Material: 材料对象

        Raises:
            ValueError: 类型未知或缺少必需参数
        """
        mat_type = props.get('type')
        if mat_type not in MaterialFactory.TYPES:
            raise ValueError(
                f"Material '{name}' has unknown type {mat_type!r}; "
                f"expected one of {MaterialFactory.TYPES}"
            )

        if mat_type == 'damage_split':
            E = props.get('E')
            nu = props.get('nu')
            if E is None or nu is None:
                raise ValueError(
                    f"Material '{name}' missing required parameters. "
                    f"Got E={E}, nu={nu}"
                )
            return MaterialFactory.create_damage_split(
                E=float(E), nu=float(nu), kdamage=float(props.get('kdamage', 1e-6))
            )

        if mat_type == 'polycrystal_elastic':
            missing = [
                key for key in ('grain_tracker', 'grain_tracker_crysrot', 'op_num')
                if props.get(key) is None
            ]
            if missing:
                raise ValueError(f"Material '{name}' missing required parameters: {missing}")
            return MaterialFactory.create_polycrystal_elastic(
                grain_tracker=props['grain_tracker'],
                grain_tracker_crysrot=props['grain_tracker_crysrot'],
                op_num=int(props['op_num']),
                length_scale=float(props.get('length_scale', 1.0e-9)),
                pressure_scale=float(props.get('pressure_scale', 1.0e6)),
            )

        # 晶体塑性
        elastic_props = props.get('elastic')
        if elastic_props is None:
            raise ValueError(f"Material '{name}' missing 'elastic' section")
        elastic = MaterialFactory._create_elastic(name, elastic_props)

        flow_props = props.get('flow', {})
        hard_props = props.get('hardening', {})
        settings = props.get('settings')

        return MaterialFactory.create_crystal_plasticity(
            elastic=elastic,
            a0=float(flow_props.get('a0', 0.001)),
            xm=float(flow_props.get('xm', 0.1)),
            slip_incr_tol=float(flow_props.get('slip_incr_tol', 2e-2)),
            r=float(hard_props.get('r', 1.0)),
            h0=float(hard_props.get('h0', 541.5)),
            tau_init=float(hard_props.get('tau_init', 60.8)),
            tau_sat=float(hard_props.get('tau_sat', 109.8)),
            q=float(hard_props.get('q', 1.4)),
            slip_systems=props.get('slip_systems'),
            C0=float(props.get('C0', 0.0)),
            C1=float(props.get('C1', 0.0)),
            time_scale=float(props.get('time_scale', 1.0)),
            euler_angles=props.get('euler_angles', (0.0, 0.0, 0.0)),
            settings=MaterialFactory._create_settings(settings),
        )

    @staticmethod
    def _create_elastic(name: str, elastic_props: Dict[str, Any]):
        """'elastic' 段: 立方 (C11, C12, C44) 或各向同性 (E, nu)"""
        if all(k in elastic_props for k in ('C11', 'C12', 'C44')):
            return CubicElastic(
                float(elastic_props['C11']),
                float(elastic_props['C12']),
                float(elastic_props['C44']),
            )
        if 'E' in elastic_props and 'nu' in elastic_props:
            return IsotropicElastic(float(elastic_props['E']), float(elastic_props['nu']))
        raise ValueError(
            f"Material '{name}' elastic section needs C11/C12/C44 or E/nu, "
            f"got keys {sorted(elastic_props)}"
        )

    @staticmethod
    def _create_settings(settings):
        """'settings' 段: dict、CrystalPlasticitySettings 实例或 None"""
        if settings is None or isinstance(settings, CrystalPlasticitySettings):
            return settings
        if isinstance(settings, dict):
            return CrystalPlasticitySettings(**settings)
        raise ValueError(
            f"settings must be a dict or CrystalPlasticitySettings, got {type(settings).__name__}"
        )

    @staticmethod
    def create_damage_split(E: float, nu: float, kdamage: float = 1e-6) -> DamageSplitElasticMaterial:
        """
        创建拉压分解相场断裂弹性材料

        Args:
            E: 杨氏模量
            nu: 泊松比
            kdamage: 残余刚度 (必须为正)
        """
        return DamageSplitElasticMaterial(IsotropicElastic(E, nu), kdamage=kdamage)

    @staticmethod
    def create_polycrystal_elastic(
        grain_tracker: GrainDataProvider,
        grain_tracker_crysrot: GrainDataProvider,
        op_num: int,
        length_scale: float = 1.0e-9,
        pressure_scale: float = 1.0e6,
    ) -> PolycrystalElasticMaterial:
        """
        创建多晶插值线弹性材料

        Args:
            grain_tracker: 弹性张量晶粒服务
            grain_tracker_crysrot: 欧拉角晶粒服务
            op_num: 序参量个数
            length_scale: 长度尺度 (m)
            pressure_scale: 压力尺度 (Pa)
        """
        interpolator = PolycrystalElasticityInterpolator(
            grain_tracker, grain_tracker_crysrot, op_num,
            length_scale=length_scale, pressure_scale=pressure_scale,
        )
        return PolycrystalElasticMaterial(interpolator)

    @staticmethod
    def create_crystal_plasticity(
        elastic,
        a0: float = 0.001,
        xm: float = 0.1,
        slip_incr_tol: float = 2e-2,
        r: float = 1.0,
        h0: float = 541.5,
        tau_init: float = 60.8,
        tau_sat: float = 109.8,
        q: float = 1.4,
        slip_systems: Optional[Sequence[Sequence[float]]] = None,
        C0: float = 0.0,
        C1: float = 0.0,
        time_scale: float = 1.0,
        euler_angles: Sequence[float] = (0.0, 0.0, 0.0),
        settings: Optional[CrystalPlasticitySettings] = None,
    ) -> CrystalPlasticityW0p:
        """
        创建晶体塑性材料

        Args:
            elastic: 弹性模型 (CubicElastic / IsotropicElastic)
            a0, xm, slip_incr_tol: 幂律流动参数
            r, h0, tau_init, tau_sat, q: 饱和硬化参数
            slip_systems: (nss, 6) 滑移系表，None 使用 FCC
            C0, C1: 人工体积粘性系数
            time_scale: 粘性应变率的参考时间
            euler_angles: 晶粒取向 (度)
            settings: 局部求解控制参数
        """
        if len(euler_angles) != 3:
            raise ValueError(f"euler_angles must have 3 entries, got {len(euler_angles)}")

        return CrystalPlasticityW0p(
            elastic=elastic,
            slip_systems=SlipSystems(slip_systems),
            flow_rule=PowerLawSlip(a0=a0, xm=xm, slip_incr_tol=slip_incr_tol),
            hardening=SaturationHardening(r=r, h0=h0, tau_init=tau_init, tau_sat=tau_sat, q=q),
            C0=C0,
            C1=C1,
            time_scale=time_scale,
            euler_angles=euler_angles,
            settings=settings,
        )
