from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import numpy as np


FrameId = int
Timestamp = int          # ns
LandmarkId = int         # untracked points carry None instead of an id


# -----------------------------
# Monocular frame (from frame sync / feature tracking)
# -----------------------------

@dataclass
class MonoFrame:
    id: FrameId
    timestamp: Timestamp
    img: np.ndarray                   # HxW (uint8) or HxWx3
    is_keyframe: bool = False
    keypoints: np.ndarray = field(default_factory=lambda: np.zeros((0, 2), dtype=np.float32))  # (N,2) px
    scores: np.ndarray = field(default_factory=lambda: np.zeros((0,), dtype=np.float32))       # (N,)
    landmarks: List[Optional[LandmarkId]] = field(default_factory=list)                         # (N,)

    def __post_init__(self):
        self.keypoints = np.asarray(self.keypoints, dtype=np.float32).reshape(-1, 2)
        self.scores = np.asarray(self.scores, dtype=np.float32).reshape(-1)
        self.landmarks = list(self.landmarks)

    @property
    def nr_keypoints(self) -> int:
        return int(self.keypoints.shape[0])

    def copy(self) -> "MonoFrame":
        return MonoFrame(
            id=self.id,
            timestamp=self.timestamp,
            img=self.img.copy(),
            is_keyframe=self.is_keyframe,
            keypoints=self.keypoints.copy(),
            scores=self.scores.copy(),
            landmarks=list(self.landmarks),
        )

    @staticmethod
    def empty(id: FrameId, timestamp: Timestamp, img: np.ndarray) -> "MonoFrame":
        return MonoFrame(id=id, timestamp=timestamp, img=img)
