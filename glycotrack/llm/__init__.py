from glycotrack.llm.anthropic_client import AnthropicClient, ReportSummarizer

__all__ = ["AnthropicClient", "ReportSummarizer"]
