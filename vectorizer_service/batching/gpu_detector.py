"""GPU detection and device selection for embedding inference."""

import platform
from typing import Any, Dict, Optional

import torch
import structlog

logger = structlog.get_logger("gpu_detector")


class GPUDetector:
    """Detects available accelerators and picks a device for the backend."""

    def __init__(self):
        self.gpu_info: Dict[str, Any] = {}
        self.current_device: Optional[str] = None
        self._detection_complete = False

    def detect_gpus(self) -> Dict[str, Any]:
        """Detect available GPU resources (cached after the first call)."""
        if self._detection_complete:
            return self.gpu_info

        gpu_info = {
            "platform": platform.system(),
            "architecture": platform.machine(),
            "cuda_available": False,
            "mps_available": False,  # Apple Metal Performance Shaders
            "gpu_count": 0,
            "recommended_device": "cpu"
        }

        try:
            if torch.cuda.is_available():
                gpu_info["cuda_available"] = True
                gpu_info["gpu_count"] = torch.cuda.device_count()
                gpu_info["recommended_device"] = "cuda:0"

            elif hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
                gpu_info["mps_available"] = True
                gpu_info["gpu_count"] = 1
                gpu_info["recommended_device"] = "mps"

        except Exception as e:
            logger.error("GPU detection failed", error=str(e))
            gpu_info["recommended_device"] = "cpu"

        self.gpu_info = gpu_info
        self._detection_complete = True

        logger.info(
            "GPU detection completed",
            cuda_available=gpu_info["cuda_available"],
            mps_available=gpu_info["mps_available"],
            gpu_count=gpu_info["gpu_count"],
            recommended_device=gpu_info["recommended_device"]
        )

        return gpu_info

    def select_device(self, preference: str = "auto") -> str:
        """Select a device for ``preference`` (``auto``, ``cpu`` or ``gpu``)."""
        if not self._detection_complete:
            self.detect_gpus()

        if preference == "cpu":
            self.current_device = "cpu"
        elif preference == "gpu":
            if self.gpu_info["cuda_available"]:
                self.current_device = "cuda:0"
            elif self.gpu_info["mps_available"]:
                self.current_device = "mps"
            else:
                logger.warning("GPU requested but not available, falling back to CPU")
                self.current_device = "cpu"
        else:  # auto
            self.current_device = self.gpu_info["recommended_device"]

        logger.info("Device selected", device=self.current_device, preference=preference)
        return self.current_device

    def optimize_batch_size(self, device: str, max_batch_size: int) -> int:
        """Suggest an encode batch size for ``device``, never above ``max_batch_size``."""
        try:
            if device.startswith("cuda:"):
                device_id = int(device.split(":")[1])
                props = torch.cuda.get_device_properties(device_id)
                memory_free = props.total_memory - torch.cuda.memory_allocated(device_id)

                # Roughly 32 sentence embeddings per free GiB.
                suggested = int(memory_free / (1024 ** 3) * 32)
                return min(max(suggested, 8), max_batch_size)

            if device == "mps":
                return min(64, max_batch_size)

            return min(128, max_batch_size)

        except Exception as e:
            logger.warning("Batch size optimization failed", device=device, error=str(e))
            return min(32, max_batch_size)


_gpu_detector: Optional[GPUDetector] = None


def get_gpu_detector() -> GPUDetector:
    """Get or create the process-wide GPU detector."""
    global _gpu_detector
    if _gpu_detector is None:
        _gpu_detector = GPUDetector()
    return _gpu_detector


def detect_optimal_device(preference: str = "auto") -> str:
    """Detect the device embedding inference should run on."""
    return get_gpu_detector().select_device(preference)


def optimize_batch_size_for_device(device: str, max_batch_size: int) -> int:
    """Suggest an encode batch size for the given device."""
    return get_gpu_detector().optimize_batch_size(device, max_batch_size)
