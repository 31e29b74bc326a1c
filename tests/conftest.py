import logging
import threading
import pytest
from unittest.mock import MagicMock
from botocore.exceptions import ClientError


def client_error(code='UnauthorizedOperation', message='denied', operation='Test'):
    return ClientError({'Error': {'Code': code, 'Message': message}}, operation)


class FakeEc2:
    """In-memory EC2 for one region that remembers every call made to it.

    ``fail`` maps an operation name, or an (operation, resource id) pair, to
    the exception that call should raise.
    """

    def __init__(self, region, vpc_id=None, igw_id=None, subnet_ids=(), fail=None):
        self.region = region
        self.vpcs = [vpc_id] if vpc_id else []
        self.igw_id = igw_id
        self.igw_attached = igw_id is not None
        self.subnets = list(subnet_ids)
        self.fail = fail or {}
        self.calls = []
        self._lock = threading.Lock()

    @property
    def call_names(self):
        return [name for name, _ in self.calls]

    def _call(self, name, resource_id=None):
        with self._lock:
            self.calls.append((name, resource_id))
        err = self.fail.get((name, resource_id)) or self.fail.get(name)
        if err:
            raise err

    def describe_vpcs(self, Filters):
        assert Filters == [{'Name': 'isDefault', 'Values': ['true']}]
        self._call('describe_vpcs')
        return {'Vpcs': [{'VpcId': v, 'IsDefault': True} for v in self.vpcs]}

    def describe_internet_gateways(self, Filters):
        self._call('describe_internet_gateways', Filters[0]['Values'][0])
        if self.igw_id and self.igw_attached and self.vpcs:
            return {'InternetGateways': [{
                'InternetGatewayId': self.igw_id,
                'Attachments': [{'VpcId': self.vpcs[0], 'State': 'available'}],
            }]}
        return {'InternetGateways': []}

    def detach_internet_gateway(self, InternetGatewayId, VpcId):
        self._call('detach_internet_gateway', InternetGatewayId)
        self.igw_attached = False

    def delete_internet_gateway(self, InternetGatewayId):
        self._call('delete_internet_gateway', InternetGatewayId)
        self.igw_id = None

    def describe_subnets(self, Filters):
        self._call('describe_subnets', Filters[0]['Values'][0])
        return {'Subnets': [{'SubnetId': s, 'VpcId': Filters[0]['Values'][0]} for s in self.subnets]}

    def delete_subnet(self, SubnetId):
        self._call('delete_subnet', SubnetId)
        self.subnets.remove(SubnetId)

    def delete_vpc(self, VpcId):
        self._call('delete_vpc', VpcId)
        self.vpcs.remove(VpcId)


class FakeSession:
    """Hands out one FakeEc2 per region plus a reference-region lister and STS."""

    def __init__(self, clients, regions=None, listing_error=None,
                 identity=None, identity_error=None, reference_region='us-east-1'):
        self.clients = {c.region: c for c in clients}
        self.reference_region = reference_region
        self.lister = MagicMock()
        if listing_error:
            self.lister.describe_regions.side_effect = listing_error
        else:
            names = list(self.clients) if regions is None else regions
            self.lister.describe_regions.return_value = {
                'Regions': [{'RegionName': r} for r in names]
            }
        self.sts = MagicMock()
        if identity_error:
            self.sts.get_caller_identity.side_effect = identity_error
        else:
            self.sts.get_caller_identity.return_value = identity or {
                'Account': '123456789012',
                'Arn': 'arn:aws:iam::123456789012:user/ops',
            }

    def client(self, service, region_name=None):
        if service == 'sts':
            return self.sts
        if region_name == self.reference_region:
            return self.lister
        return self.clients.setdefault(region_name, FakeEc2(region_name))


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
