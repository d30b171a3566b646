from typing import Literal


existing_services = Literal[
    "secret_manager",
]


existing_cloud_providers = Literal["openstack"]
