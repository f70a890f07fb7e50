"""服务层模块.

提供用户资源的读写业务逻辑.
"""
