import base64

from cloudkeys import universal_factory


def main():
    # Example usage of the universal factory
    openstack_config = {
        "auth_url": "https://keystone.example.com:5000/v3",
        "username": "lb-admin",
        "password": "s3cr3t",
        "project_name": "loadbalancers",
        "user_domain_name": "Default",
        "project_domain_name": "Default",
        "region_name": "RegionOne",
    }

    secrets = universal_factory("secret_manager", "openstack", openstack_config)

    payload = base64.b64encode(b"-----BEGIN CERTIFICATE-----...").decode()
    ref = secrets.ensure_secret("lb-7f3a-listener-443", "application/octet-stream", payload)
    print(f"Secret ref: {ref}")
    print(f"Secret ID: {secrets.parse_secret_id(ref)}")

    # Clean up every secret created for the load balancer
    secrets.delete_secrets("lb-7f3a")

if __name__ == "__main__":
    main()
