from dataclasses import dataclass


@dataclass
class ParallelConfig:
    n_jobs: int = 1  # -1 uses all cores, as in joblib
    prefer: str = "threads"  # "threads" or "processes"
    min_chunk_size: int = 1

    def __post_init__(self):
        if self.n_jobs == 0:
            raise ValueError("n_jobs must be a non-zero integer.")
        if self.prefer not in ("threads", "processes"):
            raise ValueError(f"prefer must be 'threads' or 'processes'; got {self.prefer!r}")
        if self.min_chunk_size < 1:
            raise ValueError(f"min_chunk_size must be at least 1; got {self.min_chunk_size}")
