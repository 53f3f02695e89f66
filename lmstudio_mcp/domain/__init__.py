"""领域层模型。

包含：
- models: ChatMessage / ChatRequest / ChatResult / ModelInfo 等请求与响应模型。
- exceptions: 错误类型定义。
"""
