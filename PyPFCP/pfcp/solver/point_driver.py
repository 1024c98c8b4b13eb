# 文件: PyPFCP/pfcp/solver/point_driver.py
"""
单积分点驱动器

在给定加载历史下推进一个材料点，代替宿主有限元框架完成:
1. 自动时间步长控制 (Auto Time Stepping)
2. 局部求解失败时缩步重试 (Cutback)
3. 时间步被接受后提交积分点状态 (committed ← current)
"""

from typing import Callable, List, Optional, Tuple

from pfcp.materials import Material, PointFields, StressResult


class MaterialPointDriver:
    """
    单积分点时间推进

    Attributes:
        material: 材料对象
        loading: 加载历史 t -> PointFields
        config: 配置字典 (total_time, initial_dt, min_dt, max_dt, grow_iterations)
        history: 已接受步的 (time, StressResult) 列表

    Example:
        driver = MaterialPointDriver(mat, lambda t: PointFields(F=F_of(t)),
                                     config={'total_time': 1.0, 'initial_dt': 0.1})
        history = driver.solve()
    """

    def __init__(
        self,
        material: Material,
        loading: Callable[[float], PointFields],
        config: Optional[dict] = None,
    ):
        """
        Args:
            material: 材料对象
            loading: 返回时刻 t 积分点场量的函数
            config: 配置字典
        """
        self.material = material
        self.loading = loading

        self.config = config or {
            "total_time": 1.0,
            "initial_dt": 0.1,
            "min_dt": 1e-6,
        }

        # 已提交 (上一收敛步) 状态
        self.state_committed = material.create_state()
        self.history: List[Tuple[float, StressResult]] = []
        self.num_cutbacks = 0
        self.log_callback = print

    def set_log_callback(self, callback):
        self.log_callback = callback

    def solve(self) -> List[Tuple[float, StressResult]]:
        """
        推进到 total_time

        Returns:
            history: 已接受步列表

        Raises:
            RuntimeError: 时间步缩减到 min_dt 以下仍不收敛
        """
        end_time = float(self.config.get("total_time", 1.0))
        dt = float(self.config.get("initial_dt", 0.1))
        min_dt = float(self.config.get("min_dt", 1e-6))
        max_dt = self.config.get("max_dt")
        grow_iterations = int(self.config.get("grow_iterations", 5))

        if end_time <= 0 or dt <= 0 or min_dt <= 0:
            raise ValueError(
                f"total_time, initial_dt and min_dt must be positive, "
                f"got {end_time}, {dt}, {min_dt}"
            )

        current_time = 0.0

        self.log_callback(f"{'TIME':<10} | {'dt':<10} | {'ITER':<5} | {'STATUS'}")
        self.log_callback("-" * 45)

        while end_time - current_time > 1e-12:
            # 步长修正
            if current_time + dt > end_time:
                dt = end_time - current_time

            fields = self.loading(current_time + dt)

            # 克隆上一步收敛的状态
            state_trial = None
            if self.state_committed is not None:
                state_trial = self.state_committed.clone()

            result = self.material.compute_stress(fields, state_trial, dt)

            if result.converged:
                current_time += dt

                # === 提交积分点状态 ===
                self.state_committed = result.state
                self.history.append((current_time, result))
                self.log_callback(
                    f"{current_time:<10.4f} | {dt:<10.4e} | {result.iterations:<5} | Converged"
                )

                if result.iterations < grow_iterations:
                    dt *= 1.5
                if max_dt is not None:
                    dt = min(dt, float(max_dt))
            else:
                dt *= 0.5
                self.num_cutbacks += 1
                if dt < min_dt:
                    self.log_callback("Step too small, aborting.")
                    raise RuntimeError(
                        f"Material point failed to converge at t={current_time:.6e} "
                        f"with dt below {min_dt:.1e}"
                    )
                self.log_callback(f">>> Cutback: dt = {dt:.4e}")

        return self.history
