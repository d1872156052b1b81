"""Master/worker farm for weighted sums of .dat files, with a thread pool and a sorting collector."""

__version__ = "0.1.0"