"""Audio graph composition for final assembly.

Five topologies, chosen from three toggles:

| narration | soundtrack | keep original | topology |
|---|---|---|---|
| yes | yes | any | narration + soundtrack via amix (longest input) |
| yes | no  | any | narration alone |
| no  | yes | any | soundtrack alone |
| no  | no  | yes | original audio passed through |
| no  | no  | no  | silent (video only) |

Original audio is superseded, never layered, once narration or a
soundtrack is present.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from reelvoice.models.mix import MixPlan, MixTopology


@dataclass(frozen=True)
class AudioGraph:
    """FFmpeg filter graph and stream maps for one MixPlan."""

    filter_complex: str | None
    maps: list[str] = field(default_factory=list)

    def args(self) -> list[str]:
        args: list[str] = []
        if self.filter_complex:
            args.extend(["-filter_complex", self.filter_complex])
        args.extend(self.maps)
        return args


def select_topology(
    has_narration: bool,
    has_soundtrack: bool,
    keep_original_audio: bool,
) -> MixTopology:
    if has_narration and has_soundtrack:
        return MixTopology.NARRATION_AND_SOUNDTRACK
    if has_narration:
        return MixTopology.NARRATION_ONLY
    if has_soundtrack:
        return MixTopology.SOUNDTRACK_ONLY
    if keep_original_audio:
        return MixTopology.ORIGINAL_AUDIO
    return MixTopology.SILENT


def plan_mix(
    has_narration: bool,
    has_soundtrack: bool,
    keep_original_audio: bool,
    *,
    narration_volume: float = 1.0,
    soundtrack_volume: float = 0.3,
) -> MixPlan:
    return MixPlan(
        topology=select_topology(has_narration, has_soundtrack, keep_original_audio),
        has_narration=has_narration,
        has_soundtrack=has_soundtrack,
        keep_original_audio=keep_original_audio,
        narration_volume=narration_volume,
        soundtrack_volume=soundtrack_volume,
    )


def input_indices(plan: MixPlan) -> dict[str, int]:
    """FFmpeg input index per source: video first, then narration, then soundtrack."""
    indices = {"video": 0}
    next_index = 1
    if plan.has_narration:
        indices["narration"] = next_index
        next_index += 1
    if plan.has_soundtrack:
        indices["soundtrack"] = next_index
    return indices


def build_audio_graph(plan: MixPlan) -> AudioGraph:
    idx = input_indices(plan)
    video_and_mix = ["-map", "0:v", "-map", "[a]"]

    if plan.topology is MixTopology.NARRATION_AND_SOUNDTRACK:
        return AudioGraph(
            f"[{idx['narration']}:a]volume={plan.narration_volume:g}[voice];"
            f"[{idx['soundtrack']}:a]volume={plan.soundtrack_volume:g}[music];"
            f"[voice][music]amix=inputs=2:duration=longest:normalize=0[a]",
            video_and_mix,
        )
    if plan.topology is MixTopology.NARRATION_ONLY:
        return AudioGraph(
            f"[{idx['narration']}:a]volume={plan.narration_volume:g}[a]",
            video_and_mix,
        )
    if plan.topology is MixTopology.SOUNDTRACK_ONLY:
        return AudioGraph(
            f"[{idx['soundtrack']}:a]volume={plan.soundtrack_volume:g}[a]",
            video_and_mix,
        )
    if plan.topology is MixTopology.ORIGINAL_AUDIO:
        return AudioGraph(None, ["-map", "0"])
    return AudioGraph(None, ["-map", "0:v"])
