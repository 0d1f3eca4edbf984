"""boto3 client management for S3 and SQS."""
