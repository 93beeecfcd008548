"""Feature modules. Each module keeps its models, repository, service and router together."""
