"""Core conversion module for convmd."""

from convmd.core.pipeline import BatchResult, ConversionStage, DocumentConverter, PipelineResult

__all__ = ["BatchResult", "ConversionStage", "DocumentConverter", "PipelineResult"]
