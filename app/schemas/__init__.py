"""请求校验 schema.

- rules: FieldRule/RequestSchema 等纯数据规则
- registry: (resource, operation) -> RequestSchema 注册表
- validation: 按规则校验 ApiRequest 并收集全部字段错误
"""
