# 文件: PyPFCP/pfcp/materials/models/crystal_plasticity.py
"""
有限变形晶体塑性 (含塑性功与人工体积粘性)

变形梯度乘法分解 F = Fe Fp，在中间构型上求解 PK2 应力残差方程，
内变量 (滑移阻力) 采用预测-校正迭代，率方程使用向后欧拉积分。

每个积分点每个时间步的流程:
1. 预测: g_tmp = g_old, S = S_old
2. 迭代: 应力 Newton 求解 (滑移增量 → 残差 → Jacobian) + 硬化更新，直到 g 收敛
3. 完成: 更新弹性能 W0e、塑性功 W0p 及其对应变的导数，提交内变量
4. 失败: 子步重试，仍失败则返回 converged=False，由宿主缩减时间步
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence
import numpy as np

from ..interfaces import (
    ElasticModel,
    Material,
    PointFields,
    SlipHardeningLaw,
    SlipRateLaw,
    StressResult,
)
from ..state import CrystalPlasticityState
from ..plastic.slip_systems import SlipSystems
from ..plastic.flow_rule import PowerLawSlip
from ..plastic.hardening import SaturationHardening
from ..plastic.bulk_viscosity import BulkViscosity
from ..tensors import (
    bulk_modulus,
    compose,
    double_contract,
    euler_to_rotation,
    four_to_voigt,
    identity_four,
    minor_symmetrize,
    norm,
    rotate_four,
    solve_four,
    tensor_to_voigt,
)


@dataclass
class CrystalPlasticitySettings:
    """
    局部求解控制参数

    Attributes:
        rtol: 应力残差相对容差
        abs_tol: 应力残差绝对容差
        maxiter: 应力 Newton 最大迭代次数
        gtol: 滑移阻力收敛容差 (相对于 max(1, max|g|))
        maxiterg: 内变量迭代最大次数
        max_substep_iter: 子步加倍最大次数 (1 表示不做子步)
    """
    rtol: float = 1e-6
    abs_tol: float = 1e-10
    maxiter: int = 50
    gtol: float = 1e-8
    maxiterg: int = 50
    max_substep_iter: int = 1

    def __post_init__(self):
        if self.rtol <= 0 or self.abs_tol <= 0 or self.gtol <= 0:
            raise ValueError("Tolerances must be positive")
        if self.maxiter < 1 or self.maxiterg < 1 or self.max_substep_iter < 1:
            raise ValueError("Iteration limits must be at least 1")


@dataclass
class _StressIterate:
    """应力迭代中间量"""
    pk2: np.ndarray
    resid: np.ndarray
    tau: np.ndarray
    dgamma: np.ndarray
    dgamma_dtau: np.ndarray
    fp_inv: np.ndarray
    fe: np.ndarray
    ee: np.ndarray
    pk2_el: np.ndarray
    iterations: int = 0


@dataclass
class _StatevarSolution:
    """内变量迭代收敛结果"""
    state: CrystalPlasticityState
    iterate: _StressIterate
    jac: np.ndarray
    iterations: int


class CrystalPlasticityW0p(Material):
    """
    有限变形晶体塑性材料 (W0p 版本)

    组件组合:
    - 弹性: 晶体坐标系弹性张量 (CubicElastic 等)
    - 滑移系: SlipSystems
    - 流动法则: PowerLawSlip
    - 硬化: SaturationHardening
    - 人工粘性: BulkViscosity (C0 Von Neumann, C1 Landshoff)

    输出:
    - stress: 中间构型 PK2 应力 (Voigt)
    - tangent: dS/dE (Voigt 6x6)，E 为 Green-Lagrange 应变
    - properties: cauchy_stress, W0e, W0p, dW0e_dstrain, dW0p_dstrain 等

    Example:
        mat = CrystalPlasticityW0p(CubicElastic(170e3, 124e3, 75e3), C0=0.1, C1=0.05)
        state = mat.create_state()
        result = mat.compute_stress(PointFields(F=F), state, dt=0.1)
        if not result.converged:
            ...  # 宿主缩减时间步
    """

    def __init__(
        self,
        elastic: ElasticModel,
        slip_systems: Optional[SlipSystems] = None,
        flow_rule: Optional[SlipRateLaw] = None,
        hardening: Optional[SlipHardeningLaw] = None,
        C0: float = 0.0,
        C1: float = 0.0,
        time_scale: float = 1.0,
        euler_angles: Sequence[float] = (0.0, 0.0, 0.0),
        settings: Optional[CrystalPlasticitySettings] = None,
    ):
        """
        Args:
            elastic: 弹性模型 (需提供晶体坐标系 C)
            slip_systems: 滑移系，默认 FCC {111}<110>
            flow_rule: 流动法则，默认 PowerLawSlip()
            hardening: 硬化律，默认 SaturationHardening()
            C0: Von Neumann 粘性系数
            C1: Landshoff 粘性系数
            time_scale: 粘性应变率的参考时间
            euler_angles: 晶粒取向 (Bunge, 度)
            settings: 局部求解控制参数
        """
        self.elastic = elastic
        self.slip_systems = slip_systems or SlipSystems()
        self.flow_rule = flow_rule or PowerLawSlip()
        self.hardening = hardening or SaturationHardening()
        if not isinstance(self.flow_rule, SlipRateLaw):
            raise TypeError(f"flow_rule must provide slip_increments(), got {type(self.flow_rule).__name__}")
        if not isinstance(self.hardening, SlipHardeningLaw):
            raise TypeError(f"hardening must provide initial_resistance() and update(), "
                            f"got {type(self.hardening).__name__}")
        self.viscosity = BulkViscosity(C0, C1, time_scale)
        self.settings = settings or CrystalPlasticitySettings()

        self.euler_angles = np.asarray(euler_angles, dtype=float)
        self.crysrot = euler_to_rotation(self.euler_angles).T
        self._C_crystal = np.asarray(elastic.C, dtype=float)
        self._C_sample = rotate_four(self._C_crystal, self.crysrot)

        self.log_callback: Optional[Callable[[str], None]] = None

    @property
    def C0(self) -> float:
        return self.viscosity.C0

    @property
    def C1(self) -> float:
        return self.viscosity.C1

    @property
    def stress_type(self):
        return 'pk2'

    def set_log_callback(self, callback: Optional[Callable[[str], None]]):
        self.log_callback = callback

    def _log(self, message: str):
        if self.log_callback is not None:
            self.log_callback(message)

    def create_state(self) -> CrystalPlasticityState:
        """创建初始材料状态 (无应力、Fp = I、g = τ_init)"""
        return CrystalPlasticityState(
            gss=self.hardening.initial_resistance(self.slip_systems.nss)
        )

    # =========================================================================
    # 主入口
    # =========================================================================

    def compute_stress(
        self,
        fields: PointFields,
        state: Optional[CrystalPlasticityState] = None,
        dt: float = 1.0
    ) -> StressResult:
        """
        推进一个时间步

        Args:
            fields: 需提供 F；可选 elasticity / crysrot (多晶耦合)
            state: 上一收敛步状态 (不会被修改)
            dt: 时间增量

        Returns:
            StressResult (converged=False 表示请求缩步)
        """
        if state is None:
            state = self.create_state()
        if dt <= 0:
            raise ValueError(f"Time increment must be positive, got {dt}")

        F = np.asarray(fields.require('F'), dtype=float)
        crysrot, C = self._orientation(fields)
        s0 = self.slip_systems.schmid_tensors(crysrot)

        solution, substeps = self._solve_qp(F, state, C, s0, dt)

        if solution is None:
            self._log(
                f"Crystal plasticity update failed after {self.settings.max_substep_iter} "
                f"substep level(s), dt={dt:.4e}; requesting cutback"
            )
            return StressResult(
                stress=tensor_to_voigt(state.pk2),
                tangent=four_to_voigt(C),
                state=state.copy(),
                is_plastic=False,
                stress_type='pk2',
                converged=False,
            )

        new_state = solution.state
        it = solution.iterate

        tangent = self._tangent_moduli(solution.jac, C, it.fp_inv)
        dW0p_dstrain = self._plastic_work_derivative(it, s0, tangent)

        je = float(np.linalg.det(it.fe))
        cauchy = it.fe @ new_state.pk2 @ it.fe.T / je

        properties = {
            'cauchy_stress': cauchy,
            'lagrangian_strain': 0.5 * (F.T @ F - np.eye(3)),
            'slip_increments': it.dgamma.copy(),
            'resolved_shear_stress': it.tau.copy(),
            'slip_resistance': new_state.gss.copy(),
            'W0e': new_state.W0e,
            'W0p': new_state.W0p,
            'dW0e_dstrain': it.fp_inv @ it.pk2_el @ it.fp_inv.T,
            'dW0p_dstrain': dW0p_dstrain,
            'crysrot': crysrot,
            'fp': new_state.fp.copy(),
            'substeps': substeps,
        }

        return StressResult(
            stress=tensor_to_voigt(new_state.pk2),
            tangent=four_to_voigt(tangent),
            state=new_state,
            is_plastic=bool(np.any(np.abs(it.dgamma) > 1e-10)),
            stress_type='pk2',
            properties=properties,
            converged=True,
            iterations=solution.iterations,
        )

    def _orientation(self, fields: PointFields):
        """晶体旋转张量与样品坐标系弹性张量 (外部场优先)"""
        if fields.crysrot is not None:
            crysrot = np.asarray(fields.crysrot, dtype=float)
        else:
            crysrot = self.crysrot

        if fields.elasticity is not None:
            C = np.asarray(fields.elasticity, dtype=float)
        elif fields.crysrot is not None:
            C = rotate_four(self._C_crystal, crysrot)
        else:
            C = self._C_sample
        return crysrot, C

    # =========================================================================
    # 子步
    # =========================================================================

    def _solve_qp(self, F, state, C, s0, dt):
        """
        子步求解

        第 k 次尝试将时间步等分为 2^k 个子步，F 在步初与步末之间线性插值。

        Returns:
            (solution, num_substep)，全部失败时 solution 为 None
        """
        F_old = state.deformation_gradient
        num_substep = 1

        for _ in range(self.settings.max_substep_iter):
            trial = state
            solution = None
            total_iterations = 0

            for istep in range(num_substep):
                F_tmp = F_old + (F - F_old) * (istep + 1) / num_substep
                solution = self._solve_statevar(F_tmp, trial, C, s0, dt / num_substep)
                if solution is None:
                    break
                trial = solution.state
                total_iterations += solution.iterations

            if solution is not None:
                solution.iterations = total_iterations
                return solution, num_substep

            num_substep *= 2

        return None, num_substep

    # =========================================================================
    # 内变量迭代
    # =========================================================================

    def _solve_statevar(self, F, old, C, s0, dt) -> Optional[_StatevarSolution]:
        """
        内变量 (滑移阻力) 预测-校正迭代

        old 为只读的步初状态，成功时返回新的状态记录。
        """
        # 预测
        fp_old_inv = np.linalg.inv(old.fp)
        gss_old = old.gss
        gss_tmp = gss_old.copy()
        pk2 = old.pk2.copy()
        S_visc = self.viscosity.pk2_contribution(
            F, old.deformation_gradient, fp_old_inv, bulk_modulus(C), dt
        )

        converged = False
        it = None
        iterg = 0
        while iterg < self.settings.maxiterg:
            it = self._solve_stress(pk2, F, fp_old_inv, gss_tmp, C, s0, S_visc, dt)
            if it is None:
                return None
            pk2 = it.pk2

            gss_prev = gss_tmp
            gss_tmp = self.hardening.update(gss_old, gss_prev, it.dgamma, self.slip_systems.same_plane)
            iterg += 1
            if np.any(gss_tmp <= 0):
                return None

            scale = max(1.0, float(np.max(np.abs(gss_tmp))))
            if np.max(np.abs(gss_tmp - gss_prev)) <= self.settings.gtol * scale:
                converged = True
                break

        if not converged:
            return None

        jac = self._calc_jacobian(it, F, fp_old_inv, C, s0)
        new_state = self._post_solve_statevar(old, it, gss_tmp, F)
        return _StatevarSolution(state=new_state, iterate=it, jac=jac, iterations=iterg)

    def _post_solve_statevar(self, old, it: _StressIterate, gss, F) -> CrystalPlasticityState:
        """提交内变量并更新能量"""
        W0e, W0p = self._update_energies(old, it)
        return CrystalPlasticityState(
            pk2=it.pk2.copy(),
            fp=np.linalg.inv(it.fp_inv),
            gss=np.array(gss, dtype=float),
            accumulated_slip=old.accumulated_slip + float(np.sum(np.abs(it.dgamma))),
            W0e=W0e,
            W0p=W0p,
            deformation_gradient=F.copy(),
        )

    @staticmethod
    def _update_energies(old, it: _StressIterate):
        """
        W0e = ½ Ee : S_el (可恢复)
        W0p = W0p_old + Σ τ_α Δγ_α (耗散，Δγ 与 τ 同号故增量非负)
        """
        W0e = 0.5 * double_contract(it.ee, it.pk2_el)
        W0p = old.W0p + max(float(np.dot(it.tau, it.dgamma)), 0.0)
        return W0e, W0p

    # =========================================================================
    # 应力 Newton 迭代
    # =========================================================================

    def _solve_stress(self, pk2, F, fp_old_inv, gss, C, s0, S_visc, dt) -> Optional[_StressIterate]:
        """滑移阻力固定时求解 PK2 残差方程"""
        it = self._calc_residual(pk2, F, fp_old_inv, gss, C, s0, S_visc, dt)
        if it is None:
            return None

        rnorm0 = norm(it.resid)
        rnorm = rnorm0
        iters = 0
        while rnorm > self.settings.rtol * rnorm0 and rnorm > self.settings.abs_tol:
            if iters >= self.settings.maxiter:
                return None

            jac = self._calc_jacobian(it, F, fp_old_inv, C, s0)
            try:
                dpk2 = solve_four(jac, it.resid)
            except np.linalg.LinAlgError:
                return None

            it = self._calc_residual(it.pk2 - dpk2, F, fp_old_inv, gss, C, s0, S_visc, dt)
            if it is None:
                return None
            rnorm = norm(it.resid)
            iters += 1

        it.iterations = iters
        return it

    def _calc_residual(self, pk2, F, fp_old_inv, gss, C, s0, S_visc, dt) -> Optional[_StressIterate]:
        """
        残差 R = S - (C : Ee + S_visc)

        Fp⁻¹ = Fp_old⁻¹ (I - Σ Δγ_α s0_α), Fe = F Fp⁻¹, Ee = ½(FeᵀFe - I)
        """
        tau = np.einsum('aij,ij->a', s0, pk2)
        dgamma, dgamma_dtau, ok = self.flow_rule.slip_increments(tau, gss, dt)
        if not ok:
            return None

        I = np.eye(3)
        eqv_slip_incr = I - np.einsum('a,aij->ij', dgamma, s0)
        fp_inv = fp_old_inv @ eqv_slip_incr
        fe = F @ fp_inv
        ee = 0.5 * (fe.T @ fe - I)
        pk2_el = double_contract(C, ee)

        return _StressIterate(
            pk2=pk2,
            resid=pk2 - pk2_el - S_visc,
            tau=tau,
            dgamma=dgamma,
            dgamma_dtau=dgamma_dtau,
            fp_inv=fp_inv,
            fe=fe,
            ee=ee,
            pk2_el=pk2_el,
        )

    @staticmethod
    def _calc_jacobian(it: _StressIterate, F, fp_old_inv, C, s0) -> np.ndarray:
        """
        dR/dS = I - C : dEe/dFe : dFe/dFp⁻¹ : Σ_α dFp⁻¹/dΔγ_α dΔγ_α/dτ_α ⊗ s0_α

        粘性项在迭代内为常量，不进入 Jacobian。
        """
        I = np.eye(3)
        dfedfpinv = np.einsum('ik,jl->ijkl', F, I)
        deedfe = 0.5 * (np.einsum('il,kj->ijkl', I, it.fe) + np.einsum('ki,jl->ijkl', it.fe, I))

        dfpinvdslip = -np.einsum('ij,ajk->aik', fp_old_inv, s0)
        s0_sym = 0.5 * (s0 + s0.transpose(0, 2, 1))
        dfpinvdpk2 = np.einsum('a,aij,akl->ijkl', it.dgamma_dtau, dfpinvdslip, s0_sym)

        chain = compose(compose(compose(C, deedfe), dfedfpinv), dfpinvdpk2)
        return identity_four() - chain

    # =========================================================================
    # 切线模量与功导数
    # =========================================================================

    @staticmethod
    def _tangent_moduli(jac, C, fp_inv) -> np.ndarray:
        """
        一致切线 dS/dE = (dR/dS)⁻¹ : C : P

        P_ijkl = Fp⁻¹_ki Fp⁻¹_lj 为 Fp 固定时 dEe/dE (对 kl 对称化)
        """
        P = minor_symmetrize(np.einsum('ki,lj->ijkl', fp_inv, fp_inv))
        return solve_four(jac, compose(C, P))

    @staticmethod
    def _plastic_work_derivative(it: _StressIterate, s0, tangent) -> np.ndarray:
        """dW0p/dE = Σ_α (Δγ_α + τ_α dΔγ_α/dτ_α) s0_α : dS/dE"""
        s0_sym = 0.5 * (s0 + s0.transpose(0, 2, 1))
        weights = it.dgamma + it.tau * it.dgamma_dtau
        return np.einsum('a,aij,ijkl->kl', weights, s0_sym, tangent)

    def __repr__(self) -> str:
        return (
            f"CrystalPlasticityW0p(nss={self.slip_systems.nss}, "
            f"C0={self.C0:.2e}, C1={self.C1:.2e}, euler={self.euler_angles.tolist()})"
        )
