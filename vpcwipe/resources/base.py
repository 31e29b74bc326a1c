from abc import ABC, abstractmethod
import logging
import threading
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from vpcwipe.core.errors import describe_error
from vpcwipe.core.report import CleanupReport

# boto3 sessions are not safe for concurrent client construction; clients are.
_CLIENT_LOCK = threading.Lock()


def regional_client(session: boto3.Session, service: str, region: str):
    with _CLIENT_LOCK:
        return session.client(service, region_name=region)


class ResourceCleaner(ABC):
    def __init__(self, session: boto3.Session, region: str, report: CleanupReport):
        self.session = session
        self.region = region
        self.report = report
        self.ec2 = regional_client(session, 'ec2', region)

    def _log(self, level, message, action=None, resource_type=None, resource_id=None):
        extra = {'region': self.region}
        if action:
            extra['action'] = action
        if resource_type:
            extra['resource_type'] = resource_type
        if resource_id:
            extra['resource_id'] = resource_id
        logging.log(level, f"[{self.region}] {message}", extra=extra)

    def _record_result(self, resource_type, resource_id, success, message=''):
        self.report.record(resource_type, f"{resource_id} ({self.region})", success, message)

    def _mutate(self, operation, resource_type, resource_id, record_success=True):
        """Run one mutating call, recording the outcome; AWS errors propagate."""
        try:
            result = operation()
        except (ClientError, BotoCoreError) as e:
            self._record_result(resource_type, resource_id, False, describe_error(e))
            raise
        if record_success:
            self._record_result(resource_type, resource_id, True)
        return result

    @abstractmethod
    def cleanup(self):
        pass
