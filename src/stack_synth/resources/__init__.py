"""Resource constructs and their property models."""

from stack_synth.resources.base import ResourceProps
from stack_synth.resources.bucket import Bucket, BucketProps
from stack_synth.resources.markers import CfnProperty, build_cfn_properties, cfn_property_paths
from stack_synth.resources.queue import Queue, QueueProps
from stack_synth.resources.registry import ResourceTypeRegistration, ResourceTypeRegistry
from stack_synth.resources.topic import Subscription, Topic, TopicProps

__all__ = [
    "Bucket",
    "BucketProps",
    "CfnProperty",
    "Queue",
    "QueueProps",
    "ResourceProps",
    "ResourceTypeRegistration",
    "ResourceTypeRegistry",
    "Subscription",
    "Topic",
    "TopicProps",
    "build_cfn_properties",
    "cfn_property_paths",
]
