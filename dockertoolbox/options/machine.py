"""Option schemas for docker-machine.

MachineOptions are the global flags placed before every docker-machine
command; EnvOptions belong to `docker-machine env`. The driver schemas are
the `--<driver>-*` flags of `docker-machine create`, one model per driver,
registered in DRIVER_OPTIONS under the driver name passed to --driver.

Required fields are the flags docker-machine refuses to create without.
Credentials are SecretStr; they are unwrapped only when the argv is built
and are masked wherever the argv is logged.
"""

from __future__ import annotations

from pydantic import SecretStr

from dockertoolbox.options.base import ToolboxOptions


class MachineOptions(ToolboxOptions):
    debug: bool = False
    storage_path: str | None = None
    tls_ca_cert: str | None = None
    tls_ca_key: str | None = None
    tls_client_cert: str | None = None
    tls_client_key: str | None = None
    github_api_token: SecretStr | None = None
    native_ssh: bool = False
    bugsnag_api_token: SecretStr | None = None


class EnvOptions(ToolboxOptions):
    swarm: bool = False
    """Display the Swarm config instead of the Docker daemon."""

    shell: str | None = None
    """Force the output syntax: fish, cmd, powershell, tcsh, emacs."""

    no_proxy: bool = False
    """Add the machine IP to NO_PROXY."""


# ── Drivers ──────────────────────────────────────────────────────────────────


class AmazonEC2DriverOptions(ToolboxOptions):
    access_key: SecretStr | None = None
    ami: str | None = None
    block_duration_minutes: int | None = None
    device_name: str | None = None
    endpoint: str | None = None
    iam_instance_profile: str | None = None
    insecure_transport: bool = False
    instance_type: str | None = None
    keypair_name: str | None = None
    monitoring: bool = False
    open_port: int | None = None
    private_address_only: bool = False
    region: str | None = None
    request_spot_instance: bool = False
    retries: int | None = None
    root_size: int | None = None
    secret_key: SecretStr | None = None
    security_group: str | None = None
    session_token: SecretStr | None = None
    spot_price: float | None = None
    ssh_keypath: str | None = None
    ssh_user: str | None = None
    subnet_id: str | None = None
    tags: str | None = None
    """Comma-separated key,value pairs: "key1,value1,key2,value2"."""
    use_ebs_optimized_instance: bool = False
    use_private_address: bool = False
    userdata: str | None = None
    volume_type: str | None = None
    vpc_id: str | None = None
    zone: str | None = None


class AzureDriverOptions(ToolboxOptions):
    subscription_id: str
    availability_set: str | None = None
    docker_port: int | None = None
    environment: str | None = None
    image: str | None = None
    location: str | None = None
    no_public_ip: bool = False

    open_port: int | str | list[int | str] | None = None
    """Ports to open; rendered as one --azure-open-port per port."""

    private_ip_address: str | None = None
    resource_group: str | None = None
    size: str | None = None
    ssh_user: str | None = None
    static_public_ip: bool = False
    subnet: str | None = None
    subnet_prefix: str | None = None
    use_private_ip: bool = False
    vnet: str | None = None


class DigitalOceanDriverOptions(ToolboxOptions):
    access_token: SecretStr
    backups: bool = False
    image: str | None = None
    ipv6: bool = False
    monitoring: bool = False
    private_networking: bool = False
    region: str | None = None
    size: str | None = None
    ssh_key_fingerprint: str | None = None
    ssh_key_path: str | None = None
    ssh_port: int | None = None
    ssh_user: str | None = None
    tags: list[str] | None = None
    userdata: str | None = None


class ExoscaleDriverOptions(ToolboxOptions):
    affinity_group: str | None = None
    api_key: SecretStr
    api_secret_key: SecretStr
    availability_zone: str | None = None
    disk_size: int | None = None
    image: str | None = None
    instance_profile: str | None = None
    security_group: str | None = None
    ssh_key: str | None = None
    ssh_user: str | None = None
    url: str | None = None
    userdata: str | None = None


class GenericDriverOptions(ToolboxOptions):
    engine_port: int | None = None
    ip_address: str
    ssh_key: str | None = None
    ssh_user: str | None = None
    ssh_port: int | None = None


class GoogleDriverOptions(ToolboxOptions):
    address: str | None = None
    disk_size: int | None = None
    disk_type: str | None = None
    machine_image: str | None = None
    machine_type: str | None = None
    network: str | None = None
    preemptible: bool = False
    project: str
    scopes: list[str] | None = None
    subnetwork: str | None = None
    tags: list[str] | None = None
    use_existing: bool = False
    use_internal_ip_only: bool = False
    use_internal_ip: bool = False
    username: str | None = None
    zone: str | None = None


class HyperVDriverOptions(ToolboxOptions):
    boot2docker_url: str | None = None
    virtual_switch: str | None = None
    disk_size: int | None = None
    memory: int | None = None
    cpu_count: int | None = None
    static_macaddress: str | None = None
    vlan_id: str | None = None


class OpenStackDriverOptions(ToolboxOptions):
    auth_url: str
    flavor_id: str | None = None
    flavor_name: str | None = None
    image_id: str | None = None
    image_name: str | None = None
    active_timeout: int | None = None
    availability_zone: str | None = None
    config_drive: bool = False
    domain_name: str | None = None
    domain_id: str | None = None
    endpoint_type: str | None = None
    floatingip_pool: str | None = None
    keypair_name: str | None = None
    insecure: bool = False
    ip_version: int | None = None
    net_name: str | None = None
    net_id: str | None = None
    password: SecretStr | None = None
    private_key_file: str | None = None
    region: str | None = None
    sec_groups: str | None = None
    ssh_port: int | None = None
    ssh_user: str | None = None
    tenant_name: str | None = None
    tenant_id: str | None = None
    user_data_file: str | None = None
    username: str | None = None


class RackspaceDriverOptions(ToolboxOptions):
    active_timeout: int | None = None
    api_key: SecretStr
    docker_install: bool = False
    endpoint_type: str | None = None
    flavor_id: str | None = None
    image_id: str | None = None
    region: str
    ssh_port: int | None = None
    ssh_user: str | None = None
    username: str


class SoftlayerDriverOptions(ToolboxOptions):
    api_endpoint: str | None = None
    api_key: SecretStr
    cpu: int | None = None
    disk_size: int | None = None
    domain: str
    hostname: str | None = None
    hourly_billing: bool = False
    image: str | None = None
    local_disk: bool = False
    memory: int | None = None
    network_max_speed: int | None = None
    private_net_only: bool = False
    private_vlan_id: str | None = None
    public_vlan_id: str | None = None
    region: str | None = None
    user: str


class VirtualBoxDriverOptions(ToolboxOptions):
    boot2docker_url: str | None = None
    cpu_count: int | None = None
    disk_size: int | None = None
    host_dns_resolver: bool = False
    hostonly_cidr: str | None = None
    hostonly_nicpromisc: str | None = None
    hostonly_nictype: str | None = None
    hostonly_no_dhcp: bool = False
    import_boot2docker_vm: str | None = None
    memory: int | None = None
    nat_nictype: str | None = None
    no_dns_proxy: bool = False
    no_share: bool = False
    no_vtx_check: bool = False
    share_folder: str | None = None
    ui_type: str | None = None


class VMwareVCloudAirDriverOptions(ToolboxOptions):
    catalog: str | None = None
    catalogitem: str | None = None
    computeid: str | None = None
    cpu_count: int | None = None
    docker_port: int | None = None
    edgegateway: str | None = None
    memory_size: int | None = None
    orgvdcnetwork: str | None = None
    password: SecretStr
    provision: bool = False
    publicip: str | None = None
    ssh_port: int | None = None
    username: str
    vdcid: str | None = None


class VMwareFusionDriverOptions(ToolboxOptions):
    boot2docker_url: str | None = None
    cpu_count: int | None = None
    disk_size: int
    memory_size: int | None = None
    no_share: bool = False


class VMwareVSphereDriverOptions(ToolboxOptions):
    boot2docker_url: str | None = None
    cpu_count: int | None = None
    datacenter: str | None = None
    datastore: str | None = None
    disk_size: int | None = None
    folder: str | None = None
    hostsystem: str | None = None
    memory_size: int | None = None
    network: str | None = None
    password: SecretStr
    pool: str | None = None
    username: str
    vcenter_port: int | None = None
    vcenter: str | None = None


DRIVER_OPTIONS: dict[str, type[ToolboxOptions]] = {
    "amazonec2": AmazonEC2DriverOptions,
    "azure": AzureDriverOptions,
    "digitalocean": DigitalOceanDriverOptions,
    "exoscale": ExoscaleDriverOptions,
    "generic": GenericDriverOptions,
    "google": GoogleDriverOptions,
    "hyperv": HyperVDriverOptions,
    "openstack": OpenStackDriverOptions,
    "rackspace": RackspaceDriverOptions,
    "softlayer": SoftlayerDriverOptions,
    "virtualbox": VirtualBoxDriverOptions,
    "vmwarevcloudair": VMwareVCloudAirDriverOptions,
    "vmwarefusion": VMwareFusionDriverOptions,
    "vmwarevsphere": VMwareVSphereDriverOptions,
}
