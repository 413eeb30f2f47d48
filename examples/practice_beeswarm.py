"""Example: lay out a week of chord-change practice counts as a beeswarm."""

from beeswarm import Margins, Observation, compute_layout, score_layout

SESSIONS = [
    ("Mon", 18),
    ("Mon", 21),
    ("Mon", 21),
    ("Tue", 24),
    ("Wed", 19),
    ("Wed", 25),
    ("Wed", 25),
    ("Wed", 26),
    ("Fri", 30),
    ("Sat", 28),
    ("Sat", 31),
]


def main() -> None:
    observations = [Observation(day, float(count)) for day, count in SESSIONS]
    result = compute_layout(observations, 400, 250, Margins(), radius=6.0)

    print(f"Bands: {', '.join(result.band_scale.categories)}")
    print(f"Value domain: {result.value_scale.domain}, ticks: {result.value_scale.ticks(5)}")
    for node in result.nodes:
        obs = node.observation
        print(
            f"{obs.category} {obs.value:>4g}: anchor=({node.anchor.x:.1f}, {node.anchor.y:.1f}) "
            f"-> ({node.position.x:.1f}, {node.position.y:.1f})"
        )

    report = score_layout(result, 6.0)
    print(f"Report: {report.summary()}")


if __name__ == "__main__":
    main()
