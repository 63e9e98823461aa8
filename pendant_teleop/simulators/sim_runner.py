"""Fixed-rate simulated jog loop.

Runs a scripted operator against a simulated pipeline, stepping the
controller at the configured rate in simulated time (no sleeping unless
--realtime is given).

Usage:
    run_jog_sim
    run_jog_sim --variant bone_jog
    run_jog_sim --duration 10 --realtime --log-level DEBUG
"""

import argparse
import time

import numpy as np

from pendant_teleop.simulators.scripted_operator import ScriptedOperator
from pendant_teleop.simulators.sim_pipeline import SimPipeline, create_sim_pipeline
from pendant_teleop.utils.config_loader import load_config
from pendant_teleop.utils.logger import get_logger, level_from_name, set_global_level

logger = get_logger("sim_runner")


def run_simulation(
    pipeline: SimPipeline,
    duration: float,
    realtime: bool = False,
    print_every: float = 0.5,
) -> int:
    """Step the pipeline for duration seconds of simulated time.

    Returns:
        Number of ticks that produced commands (gate open).
    """
    controller = pipeline.controller
    operator = ScriptedOperator(
        controller,
        pipeline.held_objects,
        control_device_id=pipeline.config.control_device_id,
    )
    dt = pipeline.config.dt
    n_steps = int(round(duration / dt))
    print_interval = max(1, int(round(print_every / dt)))
    gated_ticks = 0

    for i in range(n_steps):
        t = i * dt
        operator.update(t)
        command = controller.step(dt)
        if command.gated:
            gated_ticks += 1

        if i % print_interval == 0:
            angles = np.round(pipeline.backend.get_joint_angles(), 1)
            target = np.round(pipeline.linear_drive.position, 3)
            print(
                f"  t={t:5.2f}s mode={controller.mode.name:<11} "
                f"set={controller.active_axis_set.name} gate={'on ' if controller.gate_open else 'off'} "
                f"joints={angles} target={target}"
            )

        if realtime:
            time.sleep(dt)

    return gated_ticks


def main():
    defaults = load_config("default")
    parser = argparse.ArgumentParser(description="Simulated arm jogging")
    parser.add_argument("--variant", default=defaults.system.variant, choices=["arm_jog", "bone_jog"])
    parser.add_argument("--duration", type=float, default=float(defaults.system.duration))
    parser.add_argument("--realtime", action="store_true", help="Sleep between ticks")
    parser.add_argument("--log-level", default=defaults.system.log_level)
    args = parser.parse_args()

    pipeline = create_sim_pipeline(args.variant)
    set_global_level(level_from_name(args.log_level))

    print(f"\n=== Jog simulation: {args.variant} ({args.duration:.1f}s @ {pipeline.config.rate_hz:.0f} Hz) ===")
    gated = run_simulation(pipeline, args.duration, realtime=args.realtime)
    print(f"\nDone: {gated} gated ticks")
    print(f"Final joint angles (deg): {np.round(pipeline.backend.get_joint_angles(), 2)}")


if __name__ == "__main__":
    main()
