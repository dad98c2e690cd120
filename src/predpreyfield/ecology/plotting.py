from __future__ import annotations

from typing import Dict, List, Optional


def plot_history(history: Dict[str, List[float]], out_path: Optional[str] = None) -> None:
    try:
        import matplotlib.pyplot as plt
    except Exception as exc:
        raise RuntimeError("matplotlib is required for plotting") from exc

    ticks = history.get("tick", [])
    count_keys = [key for key in history.keys() if key.endswith("_count")]

    fig, axes = plt.subplots(2, 1, figsize=(10, 6), sharex=True)

    ax = axes[0]
    for key in count_keys:
        ax.plot(ticks, history.get(key, []), label=key[: -len("_count")])
    ax.set_ylabel("population")
    ax.legend()

    ax = axes[1]
    ax.plot(ticks, history.get("births", []), label="births")
    ax.plot(ticks, history.get("deaths", []), label="deaths")
    ax.set_ylabel("events per tick")
    ax.legend()

    axes[-1].set_xlabel("tick")

    fig.tight_layout()
    if out_path:
        fig.savefig(out_path)
        plt.close(fig)
    else:
        plt.show()
