"""Fan-out consumer for a shared SQS command queue."""
