from unittest.mock import MagicMock

from datastream_errors import ClusterConflict, ClusterNotFound


def api_error(cls, status, body=None, message="error"):
    """Build an elasticsearch ApiError subclass carrying ``status``."""
    return cls(message=message, meta=MagicMock(status=status), body=body or {})


class FakeClusterClient:
    """Records calls in order; behaviour is driven by the attributes below."""

    def __init__(self, exists=True, create_error=None, check_error=None,
                 policy_error=None, template_error=None, bulk_response=None):
        self.calls = []
        self.exists = exists
        self.create_error = create_error
        self.check_error = check_error
        self.policy_error = policy_error
        self.template_error = template_error
        self.bulk_response = bulk_response if bulk_response is not None else {"errors": False, "items": []}
        self.bulk_bodies = []

    def put_lifecycle_policy(self, name, policy):
        self.calls.append(('put_lifecycle_policy', name))
        if self.policy_error:
            raise self.policy_error

    def put_index_template(self, name, pattern, policy_name):
        self.calls.append(('put_index_template', name, pattern, policy_name))
        if self.template_error:
            raise self.template_error

    def data_stream_exists(self, name):
        self.calls.append(('data_stream_exists', name))
        if self.check_error:
            raise self.check_error
        return self.exists

    def put_data_stream(self, name):
        self.calls.append(('put_data_stream', name))
        if self.create_error:
            raise self.create_error
        # a second bootstrap sees the stream
        self.exists = True

    def bulk_write(self, stream_name, body):
        self.calls.append(('bulk_write', stream_name))
        self.bulk_bodies.append(body.to_ndjson())
        return self.bulk_response

    def names(self):
        return [c[0] for c in self.calls]


def conflict(message="resource_already_exists_exception"):
    return ClusterConflict(message, 400)


def not_found(message="no such data stream"):
    return ClusterNotFound(message, 404)
