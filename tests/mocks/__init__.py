"""
Mock服务模块

提供用于测试的桩传输层，替代真实的网络请求。
"""

from .stub_transport import StubTransport

__all__ = [
    "StubTransport"
]
