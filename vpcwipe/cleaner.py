import logging
import boto3
from botocore.exceptions import BotoCoreError, ClientError

from vpcwipe.core.config import Config
from vpcwipe.core.errors import BootstrapError, RegionEnumerationError, describe_error
from vpcwipe.core.logging import timed
from vpcwipe.core.pool import RegionPool
from vpcwipe.core.report import CleanupReport
from vpcwipe.resources.base import regional_client
from vpcwipe.resources.vpc import DefaultVpcCleaner, RegionResult, RegionState


class DefaultVpcWiper:
    def __init__(self, config: Config, session=None):
        self.config = config
        if session is None:
            try:
                session = boto3.session.Session(profile_name=config.profile)
            except BotoCoreError as e:
                raise BootstrapError(f"Error creating session: {describe_error(e)}") from e
        self.session = session
        self.report = CleanupReport()
        self.account_id = None
        self.arn = None

    def get_caller_identity(self):
        try:
            sts = regional_client(self.session, 'sts', self.config.reference_region)
            identity = sts.get_caller_identity()
        except (ClientError, BotoCoreError) as e:
            raise BootstrapError(f"Error getting caller identity: {describe_error(e)}") from e
        self.account_id = identity.get('Account')
        self.arn = identity.get('Arn')
        if self.arn:
            logging.info(f"Logged in as: {self.arn}")
        return identity

    def get_all_regions(self):
        """List every region visible from the reference region's endpoint.

        Raises RegionEnumerationError when the call fails; an account that
        legitimately lists no regions gets an empty list instead.
        """
        ec2 = regional_client(self.session, 'ec2', self.config.reference_region)
        try:
            response = ec2.describe_regions()
        except (ClientError, BotoCoreError) as e:
            message = describe_error(e)
            logging.error(f"Failed to get regions: {message}")
            raise RegionEnumerationError(message) from e
        regions = [r['RegionName'] for r in response.get('Regions', [])]
        logging.info('Retrieved regions: %s', regions)
        return regions

    def select_regions(self, regions):
        selected = [r for r in regions if self.config.should_include_region(r)]
        if "all" not in self.config.regions:
            missing = sorted(set(self.config.regions) - set(regions))
            if missing:
                logging.warning(f"Configured regions not available to this account: {missing}")
        return selected

    @timed
    def teardown_region(self, region) -> RegionResult:
        return DefaultVpcCleaner(self.session, region, self.report).cleanup()

    def _region_crashed(self, region, ex):
        message = describe_error(ex)
        self.report.record('Region Errors', region, False, message)
        return RegionResult(region, state=RegionState.FAILED, error=message)

    def purge(self):
        """Tear down the default VPC in every selected region and wait for all of them."""
        regions = self.select_regions(self.get_all_regions())
        if not regions:
            logging.warning('No regions found, nothing to do')
            return {}

        logging.info(f"Cleaning regions: {regions}")
        pool = RegionPool(self.config.max_workers)
        results = pool.run(regions, self.teardown_region, on_error=self._region_crashed)

        failed = sorted(r for r, res in results.items() if not res.succeeded)
        cleaned = sorted(r for r, res in results.items() if res.state is RegionState.DONE)
        logging.info(f"Deleted default VPC in {len(cleaned)} of {len(results)} regions")
        if failed:
            logging.warning(f"Regions with errors: {failed}")
        logging.info('=== Default VPC cleanup complete! ===')
        self.report.print_report()
        return results
