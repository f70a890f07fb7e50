"""工具模块.

主要工具:
- structlog_config: 结构化日志配置
- response_utils: 统一响应封套
- sensitive_data: 敏感字段脱敏
"""
