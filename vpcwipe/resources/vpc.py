import enum
import logging
from dataclasses import dataclass
from typing import Optional
from botocore.exceptions import BotoCoreError, ClientError
from vpcwipe.core.errors import describe_error
from vpcwipe.resources.base import ResourceCleaner


class RegionState(enum.Enum):
    START = 'start'
    LOCATING_VPC = 'locating default VPC'
    NO_DEFAULT_VPC = 'no default VPC'
    VPC_FOUND = 'default VPC found'
    HANDLING_GATEWAY = 'handling internet gateway'
    HANDLING_SUBNETS = 'handling subnets'
    DELETING_VPC = 'deleting VPC'
    DONE = 'done'
    FAILED = 'failed'

    @property
    def terminal(self):
        return self in (RegionState.NO_DEFAULT_VPC, RegionState.DONE, RegionState.FAILED)


@dataclass
class RegionResult:
    region: str
    state: RegionState = RegionState.START
    vpc_id: Optional[str] = None
    failed_state: Optional[RegionState] = None
    error: Optional[str] = None

    @property
    def succeeded(self):
        return self.state in (RegionState.NO_DEFAULT_VPC, RegionState.DONE)


class DefaultVpcCleaner(ResourceCleaner):
    """Tears down one region's default VPC: gateway, then subnets, then the VPC.

    The steps run strictly in that order and the first AWS error stops the
    region. "Not found" answers (no default VPC, no gateway, no subnets) are
    normal outcomes, not failures. Nothing is retried.
    """

    def cleanup(self):
        result = RegionResult(self.region)
        self._advance(result, RegionState.LOCATING_VPC)
        try:
            vpc_id = self.find_default_vpc()
            if vpc_id is None:
                self._log(logging.INFO, "No default VPC found", action='locate')
                self._advance(result, RegionState.NO_DEFAULT_VPC)
                return result

            result.vpc_id = vpc_id
            self._advance(result, RegionState.VPC_FOUND)
            self._log(logging.INFO, f"Found default VPC: {vpc_id}", action='locate',
                      resource_type='VPCs', resource_id=vpc_id)

            self._advance(result, RegionState.HANDLING_GATEWAY)
            self.delete_internet_gateway(vpc_id)

            self._advance(result, RegionState.HANDLING_SUBNETS)
            self.delete_subnets(vpc_id)

            self._advance(result, RegionState.DELETING_VPC)
            self.delete_vpc(vpc_id)
        except (ClientError, BotoCoreError) as e:
            message = describe_error(e)
            result.failed_state = result.state
            result.error = message
            self._log(logging.ERROR, f"Error while {result.state.value}: {message}", action='fail')
            self._advance(result, RegionState.FAILED)
            return result

        self._advance(result, RegionState.DONE)
        return result

    def _advance(self, result, state):
        logging.debug(f"[{self.region}] {result.state.name} -> {state.name}")
        result.state = state

    def find_default_vpc(self):
        vpcs = self.ec2.describe_vpcs(
            Filters=[{'Name': 'isDefault', 'Values': ['true']}]
        ).get('Vpcs', [])
        if not vpcs:
            return None
        if len(vpcs) > 1:
            logging.warning(f"[{self.region}] {len(vpcs)} default VPCs returned, using the first")
        return vpcs[0]['VpcId']

    def delete_internet_gateway(self, vpc_id):
        igws = self.ec2.describe_internet_gateways(
            Filters=[{'Name': 'attachment.vpc-id', 'Values': [vpc_id]}]
        ).get('InternetGateways', [])
        if not igws:
            self._log(logging.INFO, f"No internet gateway found for vpc {vpc_id}", action='skip')
            return

        igw_id = igws[0]['InternetGatewayId']
        self._log(logging.INFO, f"Detaching and deleting internet gateway: {igw_id}", action='delete',
                  resource_type='Internet Gateways', resource_id=igw_id)
        self._mutate(lambda: self.ec2.detach_internet_gateway(InternetGatewayId=igw_id, VpcId=vpc_id),
                     'Internet Gateways', igw_id, record_success=False)
        self._mutate(lambda: self.ec2.delete_internet_gateway(InternetGatewayId=igw_id),
                     'Internet Gateways', igw_id)

    def delete_subnets(self, vpc_id):
        subnets = self.ec2.describe_subnets(
            Filters=[{'Name': 'vpc-id', 'Values': [vpc_id]}]
        ).get('Subnets', [])
        if not subnets:
            self._log(logging.INFO, f"No subnets found for vpc {vpc_id}", action='skip')
            return

        for subnet in subnets:
            sn_id = subnet['SubnetId']
            self._log(logging.INFO, f"Deleting subnet: {sn_id}", action='delete',
                      resource_type='Subnets', resource_id=sn_id)
            self._mutate(lambda: self.ec2.delete_subnet(SubnetId=sn_id), 'Subnets', sn_id)

    def delete_vpc(self, vpc_id):
        self._log(logging.INFO, f"Deleting VPC: {vpc_id}", action='delete',
                  resource_type='VPCs', resource_id=vpc_id)
        self._mutate(lambda: self.ec2.delete_vpc(VpcId=vpc_id), 'VPCs', vpc_id)
