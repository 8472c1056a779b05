"""Batching helpers for embedding inference.

- ``gpu_detector``: detects CUDA / MPS accelerators, picks the device the
  backend loads on, and suggests an encode batch size for it.
"""
