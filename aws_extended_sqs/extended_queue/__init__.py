"""Batched SQS client with S3 offload of oversize messages."""
