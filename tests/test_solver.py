"""
End-to-end tests for the interactive solver.

Initialization, generation swapping, kernel agreement, forcing and the
numerical instrumentation.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lbm_fluid.lattice import FLUID, WALL
from lbm_fluid.collision import RELAXATION_BETA
from lbm_fluid.config import StepConfig
from lbm_fluid.diagnostics import StepDiagnostics, check_finite
from lbm_fluid.equilibrium import equilibrium_single_site
from lbm_fluid.grid import GridState
from lbm_fluid.initializer import initialize_grid
from lbm_fluid.kernels import lbm_step, lbm_step_fast
from lbm_fluid.solver import InteractiveLBMSolver


def stroke(step, nx, ny):
    """Scripted cursor moving right through the lower part of the grid."""
    x = 0.2 * nx + step
    return StepConfig.from_pixels(x, 0.3 * ny, x - 1.0, 0.3 * ny, ny)


class TestInitialization:
    """Initializer contract."""

    def test_fluid_cells_at_rest_equilibrium(self):
        solver = InteractiveLBMSolver(40, 30, use_fast=False)
        solver.step(StepConfig.initial())

        fluid = solver.cell_type == FLUID
        expected = equilibrium_single_site(1.0, 0.0, 0.0)
        np.testing.assert_allclose(solver.f[:, fluid], np.repeat(expected[:, None], fluid.sum(), axis=1))
        np.testing.assert_allclose(np.sum(solver.f[:, fluid], axis=0), 1.0, rtol=1e-14)

    def test_repeated_initialization_is_identical(self):
        a = InteractiveLBMSolver(40, 30)
        b = InteractiveLBMSolver(40, 30)
        a.step(StepConfig.initial())
        b.step(StepConfig.initial())
        b.step(StepConfig.initial())

        np.testing.assert_array_equal(a.cell_type, b.cell_type)
        np.testing.assert_array_equal(a.f, b.f)

    def test_reset_after_running(self):
        solver = InteractiveLBMSolver(32, 32, use_fast=False)
        solver.step(StepConfig.initial())
        reference = solver.f.copy()

        for step in range(5):
            solver.step(stroke(step, 32, 32))
        solver.step(StepConfig.initial())

        np.testing.assert_array_equal(solver.f, reference)
        assert solver.step_count == 0

    def test_reset_keeps_explicit_conditions(self):
        nx, ny = 8, 8
        ux = np.full((ny, nx), 0.1)
        solver = InteractiveLBMSolver(nx, ny, use_fast=False)
        solver.initialize(type_mask=np.full((ny, nx), FLUID, dtype=np.uint8), ux=ux)
        reference = solver.f.copy()

        for _ in range(3):
            solver.step()
        solver.step(StepConfig.initial())

        assert np.all(solver.cell_type == FLUID)
        np.testing.assert_array_equal(solver.f, reference)

    def test_init_does_not_swap(self):
        solver = InteractiveLBMSolver(8, 8)
        solver.step(StepConfig.initial())
        assert solver.state.current_index == 0

    def test_step_before_init_raises(self):
        solver = InteractiveLBMSolver(8, 8)
        with pytest.raises(RuntimeError):
            solver.step(StepConfig.idle())

    def test_invalid_dimensions(self):
        with pytest.raises(ValueError):
            GridState(0, 10)

    def test_mask_shape_checked(self):
        state = GridState(8, 6)
        with pytest.raises(ValueError):
            initialize_grid(state, type_mask=np.zeros((8, 6), dtype=np.uint8))

    def test_initial_velocity_must_be_subsonic(self):
        state = GridState(8, 6)
        with pytest.raises(ValueError):
            initialize_grid(state, ux=np.full((6, 8), 1.0))


class TestEndToEnd:
    """Small grids with known outcome."""

    @pytest.mark.parametrize("use_fast", [False, True])
    def test_all_fluid_grid_is_steady(self, use_fast):
        """4 x 4 periodic fluid at rest stays put after an idle step."""
        solver = InteractiveLBMSolver(4, 4, use_fast=use_fast)
        solver.initialize(type_mask=np.full((4, 4), FLUID, dtype=np.uint8))

        initial = solver.f.copy()
        single_cell_mass = np.sum(initial[:, 0, 0])

        solver.step(StepConfig(cursor_delta=(0.0, 0.0), init=False))

        assert solver.state.current_index == 1
        np.testing.assert_allclose(solver.f, initial, rtol=1e-12)
        assert np.isclose(solver.get_total_mass(), 16.0 * single_cell_mass, rtol=1e-12)

    @pytest.mark.parametrize("use_fast", [False, True])
    def test_default_grid_is_steady_without_input(self, use_fast):
        solver = InteractiveLBMSolver(24, 16, use_fast=use_fast)
        solver.step(StepConfig.initial())
        initial = solver.f.copy()
        fluid = solver.cell_type == FLUID

        for _ in range(3):
            solver.step()

        np.testing.assert_allclose(solver.f[:, fluid], initial[:, fluid], rtol=1e-12)

    def test_generations_alternate(self):
        solver = InteractiveLBMSolver(8, 8)
        solver.step(StepConfig.initial())
        solver.step()
        assert np.shares_memory(solver.f, solver.state.buffers[1])
        assert solver.state.current_index == 1
        solver.step()
        assert solver.state.current_index == 0

    def test_stroke_injects_momentum(self):
        nx, ny = 40, 40
        solver = InteractiveLBMSolver(nx, ny, use_fast=False)
        solver.step(StepConfig.initial())

        diagnostics = StepDiagnostics()
        config = StepConfig(cursor_position=(0.25, 0.25), cursor_delta=(0.01, 0.0))
        solver.step(config, diagnostics=diagnostics)

        mom_x, mom_y = solver.get_total_momentum()
        assert diagnostics.forced_cells > 0
        # Collision over-relaxes toward the forced equilibrium: 2 beta times the kick
        expected = diagnostics.forced_cells * 0.05 * 2.0 * RELAXATION_BETA
        assert np.isclose(mom_x, expected, rtol=1e-10)
        assert abs(mom_y) < 1e-12

    def test_field_getters(self):
        solver = InteractiveLBMSolver(32, 24, use_fast=False)
        solver.step(StepConfig.initial())
        for step in range(3):
            solver.step(stroke(step, 32, 24))

        rho, px, py = solver.get_macroscopic()
        ux, uy = solver.get_velocity()
        fluid = solver.cell_type == FLUID

        np.testing.assert_allclose(rho[fluid], np.sum(solver.f[:, fluid], axis=0), rtol=1e-12)
        np.testing.assert_allclose(ux[fluid], px[fluid] / rho[fluid], rtol=1e-10, atol=1e-15)
        np.testing.assert_allclose(uy[fluid], py[fluid] / rho[fluid], rtol=1e-10, atol=1e-15)
        assert np.max(np.abs(ux[fluid])) > 0.0

    def test_in_place_step_rejected(self):
        state = GridState(4, 4)
        with pytest.raises(ValueError):
            lbm_step(state.current, state.current, state.cell_type, StepConfig.idle())
        with pytest.raises(ValueError):
            lbm_step_fast(state.current, state.current, state.cell_type, StepConfig.idle())

    @pytest.mark.parametrize("use_fast", [False, True])
    def test_overlapping_buffers_rejected(self, use_fast):
        step = lbm_step_fast if use_fast else lbm_step
        state = GridState(6, 4)
        initialize_grid(state)
        before = state.current.copy()

        with pytest.raises(ValueError):
            step(state.buffers[0], state.buffers[0][:], state.cell_type, StepConfig.idle())
        with pytest.raises(ValueError):
            step(state.buffers, state.buffers[1], state.cell_type, StepConfig.idle())

        np.testing.assert_array_equal(state.current, before)
        step(state.current, state.next, state.cell_type, StepConfig.idle())


class TestKernelAgreement:
    """NumPy reference and fused Numba kernel give the same field."""

    def test_numba_matches_numpy_with_stirring(self):
        nx, ny = 48, 32
        slow = InteractiveLBMSolver(nx, ny, use_fast=False)
        fast = InteractiveLBMSolver(nx, ny, use_fast=True)
        slow.step(StepConfig.initial())
        fast.step(StepConfig.initial())

        for step in range(12):
            config = stroke(step, nx, ny)
            slow.step(config)
            fast.step(config)

        np.testing.assert_allclose(fast.f, slow.f, rtol=1e-10, atol=1e-14)

    def test_single_step_from_equilibrium_field(self):
        state = GridState(20, 12)
        rng = np.random.default_rng(1)
        initialize_grid(
            state,
            ux=0.05 * rng.standard_normal((12, 20)),
            uy=0.05 * rng.standard_normal((12, 20)),
        )
        config = StepConfig(cursor_position=(0.25, 0.5), cursor_delta=(0.0, 0.02))

        out_slow = np.zeros_like(state.current)
        out_fast = np.zeros_like(state.current)
        lbm_step(state.current, out_slow, state.cell_type, config)
        lbm_step_fast(state.current, out_fast, state.cell_type, config)

        np.testing.assert_allclose(out_fast, out_slow, rtol=1e-12, atol=1e-15)


class TestDiagnostics:
    """Instrumentation reports numerical trouble without changing results."""

    def test_floor_reported(self):
        state = GridState(3, 3)
        initialize_grid(state, type_mask=np.full((3, 3), FLUID, dtype=np.uint8))
        state.current[:, 1, 1] = 0.0
        state.current[0, 1, 1] = 1.0

        diagnostics = StepDiagnostics()
        out = np.zeros_like(state.current)
        lbm_step(state.current, out, state.cell_type, StepConfig.idle(),
                 diagnostics=diagnostics)

        assert diagnostics.negative_before_clamp == 1
        assert not diagnostics.clean
        assert np.all(out >= 0.0)
        assert np.sum(out) > np.sum(state.current)

    def test_instrumentation_does_not_change_result(self):
        state = GridState(16, 16)
        initialize_grid(state)
        config = StepConfig(cursor_position=(0.3, 0.3), cursor_delta=(0.02, 0.01))

        plain = np.zeros_like(state.current)
        instrumented = np.zeros_like(state.current)
        lbm_step(state.current, plain, state.cell_type, config)
        lbm_step(state.current, instrumented, state.cell_type, config,
                 diagnostics=StepDiagnostics())

        np.testing.assert_array_equal(plain, instrumented)

    def test_check_finite_warns(self):
        state = GridState(6, 6)
        initialize_grid(state)
        assert check_finite(state.current, state.cell_type) == 0

        fluid_y, fluid_x = np.argwhere(state.cell_type == FLUID)[0]
        state.current[2, fluid_y, fluid_x] = np.nan

        with pytest.warns(RuntimeWarning):
            count = check_finite(state.current, state.cell_type)
        assert count == 1

    def test_check_finite_ignores_walls(self):
        state = GridState(6, 6)
        initialize_grid(state)
        state.current[:, state.cell_type == WALL] = np.inf
        assert check_finite(state.current, state.cell_type, warn=False) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
