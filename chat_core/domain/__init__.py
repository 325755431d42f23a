"""领域层模型与协议。

包含：
- models: 统一的 ChatMessage / RelayResult 模型。
- conversation: 已保存会话模型、标题规则及 KeyValueStorage 抽象。
- exceptions: 业务异常类型定义。
"""
