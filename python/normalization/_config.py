"""
Environment switches read once at import.

    NORMALIZATION_USE_THREADS=0   run slice maps serially
    NORMALIZATION_NUM_THREADS=4   cap the thread pool size
"""
import os

USE_THREADS = os.environ.get("NORMALIZATION_USE_THREADS", "1") != "0"

_num_threads = os.environ.get("NORMALIZATION_NUM_THREADS", "")
NUM_THREADS = int(_num_threads) if _num_threads.strip() else None
