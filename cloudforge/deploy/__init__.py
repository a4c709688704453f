"""Upload of build output to S3 and CloudFront invalidation."""
