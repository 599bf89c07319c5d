import numpy as np
import matplotlib.pyplot as plt

from ephysforge.config.yaml_utils import load_config
from ephysforge.core.simulation_engine import SimulationEngine


def main():
    # Tetrode sitting just above the pyramidal layer, spike band
    config = load_config("examples/configs/ca1_tetrode.yml")
    engine = SimulationEngine(config)

    # Two seconds of activity at 2.5 ms per frame
    engine.run(num_frames=800)

    # Standing field around the layer for the last frame
    xs = np.linspace(1000, 1500, 101)
    ys = np.linspace(-1500, -800, 141)
    field = engine.field_map(xs, ys).numpy()

    fig, axes = plt.subplots(3, 1, figsize=(10, 12))

    # Traces, one offset per channel
    t = np.arange(-engine.tetrode[0].history_length, 0) * engine.dt * engine.steps_per_frame
    for i, electrode in enumerate(engine.electrodes):
        axes[0].plot(t, electrode.history_array() - 0.3 * i, lw=0.8, label=electrode.name)
    axes[0].set_xlabel("time (s)")
    axes[0].set_ylabel("mV (offset)")
    axes[0].legend(loc="upper right")
    axes[0].set_title(f"Tetrode traces ({engine.filter_mode.value})")

    # Cluster view: Ch1 vs Ch2 amplitudes
    amplitudes = engine.spike_records.as_array()
    if amplitudes.size:
        axes[1].scatter(amplitudes[:, 0], amplitudes[:, 1], s=6)
    axes[1].set_xlabel("Ch1 amplitude (mV)")
    axes[1].set_ylabel("Ch2 amplitude (mV)")
    axes[1].set_title(f"{len(engine.spike_records)} detected spikes")

    # Field map with neurons and electrodes
    limit = np.percentile(np.abs(field), 99) or 1.0
    axes[2].imshow(
        field,
        origin="lower",
        extent=(xs[0], xs[-1], ys[0], ys[-1]),
        cmap="RdBu_r",
        vmin=-limit,
        vmax=limit,
        aspect="auto",
    )
    somas = np.array([n.soma for n in engine.neurons])
    axes[2].scatter(somas[:, 0], somas[:, 1], c="k", s=10, marker="^")
    pos = np.array(engine.tetrode.positions())
    axes[2].scatter(pos[:, 0], pos[:, 1], c="gold", s=12)
    axes[2].set_title("Raw potential")

    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
