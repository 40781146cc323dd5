"""
GPU engine using PyTorch.

Supports CUDA (Linux/Windows) and MPS (macOS Apple Silicon). CUDA runs in
float64 and matches the NumPy engine to machine precision. MPS has no
float64, so it computes in float32 and warns once per engine.

Operands are moved to the device for each kernel call and results are
brought back as float64 numpy arrays, so expression nodes never see a
tensor.
"""

from __future__ import annotations

from typing import Any
import warnings

import numpy as np
from numpy.typing import NDArray

from lazyalgebra.core.compute.device import DeviceInfo, select_device
from lazyalgebra.engine._common import check_matvec, check_matmul, check_transpose


class TorchEngine:
    """
    GPU engine using PyTorch.

    Parameters
    ----------
    device : DeviceInfo, optional
        Device info from select_device(). If None, requires a GPU.
    """

    def __init__(self, device: DeviceInfo | None = None):
        import torch

        self._torch = torch
        if device is None:
            device = select_device('gpu')

        self.warnings: tuple[str, ...] = ()
        if device.device_type == 'cuda':
            self.device = torch.device(f'cuda:{device.device_index or 0}')
            self.dtype = torch.float64
        elif device.device_type == 'mps':
            self.device = torch.device('mps')
            self.dtype = torch.float32
            message = "MPS does not support float64; TorchEngine computes in float32"
            warnings.warn(message)
            self.warnings = (message,)
        else:
            raise ValueError(
                f"TorchEngine requires GPU device, got {device.device_type}"
            )
        self.device_info = device

    @property
    def name(self) -> str:
        if self.dtype == self._torch.float64:
            return 'gpu_torch_fp64'
        return 'gpu_torch_fp32'

    def _to_device(self, array: NDArray) -> Any:
        # np.array copies, so read-only cached results transfer without warnings
        host = np.array(array, dtype=np.float64)
        return self._torch.from_numpy(host).to(device=self.device, dtype=self.dtype)

    def _to_host(self, tensor: Any) -> NDArray[np.floating[Any]]:
        return tensor.cpu().numpy().astype(np.float64)

    def zeros(self, *shape: int) -> NDArray[np.floating[Any]]:
        return np.zeros(shape, dtype=np.float64)

    def ax(
        self,
        A: NDArray[np.floating[Any]],
        x: NDArray[np.floating[Any]],
        out: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        check_matvec(A, x, out, transposed=False)
        out[...] = self._to_host(self._to_device(A) @ self._to_device(x))
        return out

    def atx(
        self,
        A: NDArray[np.floating[Any]],
        x: NDArray[np.floating[Any]],
        out: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        check_matvec(A, x, out, transposed=True)
        out[...] = self._to_host(self._to_device(A).T @ self._to_device(x))
        return out

    def abmm(
        self,
        A: NDArray[np.floating[Any]],
        B: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        check_matmul(A, B, 'abmm')
        return self._to_host(self._to_device(A) @ self._to_device(B))

    def atbmm(
        self,
        A: NDArray[np.floating[Any]],
        B: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        check_matmul(A, B, 'atbmm')
        return self._to_host(self._to_device(A).T @ self._to_device(B))

    def abtmm(
        self,
        A: NDArray[np.floating[Any]],
        B: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        check_matmul(A, B, 'abtmm')
        return self._to_host(self._to_device(A) @ self._to_device(B).T)

    def transpose(
        self,
        A: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        check_transpose(A)
        return self._to_host(self._to_device(A).T.contiguous())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(device={self.device_info})"
