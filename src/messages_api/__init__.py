"""Messages API: relay messages from HTTP to SQS and S3."""
