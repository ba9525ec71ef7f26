"""
CLI - command line interface for Docker images
"""

import argparse
import sys
import logging
from datetime import datetime
from typing import BinaryIO, List, Optional

from .docker_api import (
    DockerClient,
    DockerException,
    AuthConfiguration,
    BuildImageOptions,
    ImportImageOptions,
    PullImageOptions,
    PushImageOptions,
)
from .settings_manager import SettingsManager

logger = logging.getLogger(__name__)


def format_size(size: int) -> str:
    """Human readable image size"""
    value = float(size)
    for unit in ('B', 'kB', 'MB', 'GB'):
        if value < 1000 or unit == 'GB':
            return f"{value:.0f} {unit}" if unit == 'B' else f"{value:.1f} {unit}"
        value /= 1000
    return f"{value:.1f} GB"


class ImageCLI:
    """Docker images CLI interface"""

    def __init__(self, client: DockerClient, out: Optional[BinaryIO] = None):
        """
        Initialize CLI

        Args:
            client: Docker client
            out: Binary stream for daemon progress output (default: stdout)
        """
        self.client = client
        self.out = out if out is not None else sys.stdout.buffer

    def _print(self, text: str = ''):
        self.out.write(f"{text}\n".encode('utf-8'))
        self.out.flush()

    def list_images(self, all_images: bool = False):
        """List images"""
        images = self.client.images.list(all=all_images)

        if not images:
            logger.info("No images found")
            return

        # Header
        self._print(f"{'REPOSITORY:TAG':<45} {'IMAGE ID':<15} {'CREATED':<20} {'SIZE':<10}")
        self._print("-" * 92)

        for image in images:
            created = datetime.fromtimestamp(image.created).strftime('%Y-%m-%d %H:%M') if image.created else ''
            for tag in image.repo_tags or ['<none>:<none>']:
                self._print(f"{tag:<45} {image.short_id:<15} {created:<20} {format_size(image.size):<10}")

        self._print(f"\nTotal: {len(images)}")

    def inspect(self, name: str):
        """Print image details"""
        image = self.client.images.inspect(name)
        self._print(f"Id:           {image.id}")
        self._print(f"Tags:         {', '.join(image.tags) or '-'}")
        self._print(f"Parent:       {image.parent or '-'}")
        self._print(f"Created:      {image.created or '-'}")
        self._print(f"Author:       {image.author or '-'}")
        self._print(f"Architecture: {image.architecture or '-'}")
        self._print(f"Docker:       {image.docker_version or '-'}")
        self._print(f"Size:         {format_size(image.size)}")

    def remove(self, name: str):
        """Remove image"""
        self.client.images.remove(name)
        logger.info(f"✓ Image {name} removed")

    def pull(self, repository: str, registry: str = ''):
        """Pull image"""
        self.client.images.pull(PullImageOptions(
            repository=repository,
            registry=registry,
            output_stream=self.out
        ))
        logger.info(f"✓ Image {repository} pulled")

    def push(self, name: str, registry: str = '', auth: Optional[AuthConfiguration] = None):
        """Push image"""
        self.client.images.push(
            PushImageOptions(name=name, registry=registry, output_stream=self.out),
            auth
        )
        logger.info(f"✓ Image {name} pushed")

    def import_image(self, source: str, repository: str, input_stream: Optional[BinaryIO] = None):
        """Import image from URL, file or stdin ('-')"""
        self.client.images.import_image(ImportImageOptions(
            repository=repository,
            source=source,
            input_stream=input_stream,
            output_stream=self.out
        ))
        logger.info(f"✓ Image imported into {repository}")

    def build(self, remote: str, name: str = '', quiet: bool = False):
        """Build image from remote context"""
        self.client.images.build(BuildImageOptions(
            name=name,
            remote=remote,
            suppress_output=quiet,
            output_stream=self.out
        ))
        logger.info(f"✓ Image {name or remote} built")

    def save(self, name: str, output_path: str):
        """Save image tarball to file"""
        with open(output_path, 'wb') as f:
            self.client.images.get_tarball(name, f)
        logger.info(f"✓ Image {name} saved to {output_path}")

    def load(self, input_path: str):
        """Load images from tarball file"""
        with open(input_path, 'rb') as f:
            self.client.images.load_tarball(f)
        logger.info(f"✓ Images loaded from {input_path}")

    def tag(self, name: str, repo: str, force: bool = False):
        """Tag image"""
        self.client.images.tag(name, repo, force=force)
        logger.info(f"✓ Image {name} tagged as {repo}")

    def version(self):
        """Show Docker version"""
        version = self.client.version() or {}
        self._print("Docker information:")
        self._print(f"  Server: {version.get('Version', 'Unknown')}")
        self._print(f"  API: {version.get('ApiVersion', 'Unknown')}")
        self._print(f"  OS/Arch: {version.get('Os', 'Unknown')}/{version.get('Arch', 'Unknown')}")


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the images CLI"""
    parser = argparse.ArgumentParser(
        description='ghost-images - Docker image manager',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Usage examples:
  %(prog)s images --all                            # List images
  %(prog)s pull --repo busybox
  %(prog)s tag --name busybox --repo me/busybox
  %(prog)s push --name me/busybox --username me --password secret
  %(prog)s build --remote github.com/user/repo --tag user/repo
  %(prog)s import --source rootfs.tar --repo me/rootfs
  %(prog)s save --name busybox --output busybox.tar
  %(prog)s load --input busybox.tar
"""
    )

    parser.add_argument(
        'action',
        choices=[
            'images', 'inspect', 'rmi', 'pull', 'push', 'import',
            'build', 'save', 'load', 'tag', 'version'
        ],
        help='Action'
    )

    # Connection parameters
    parser.add_argument('--host', help='Docker endpoint (unix:///path or tcp://host:port)')
    parser.add_argument('--timeout', type=int, help='Request timeout in seconds')
    parser.add_argument('--settings', help='Settings file path')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    # Image parameters
    parser.add_argument('--name', help='Image name or ID')
    parser.add_argument('--repo', help='Repository')
    parser.add_argument('--registry', default='', help='Registry server')
    parser.add_argument('--source', help="Import source: URL, file or '-' for stdin")
    parser.add_argument('--remote', help='Remote build context (git repository or tarball URL)')
    parser.add_argument('-t', '--tag', default='', help='Name for the built image')
    parser.add_argument('-q', '--quiet', action='store_true', help='Suppress build output')
    parser.add_argument('-o', '--output', help='Tarball file to write')
    parser.add_argument('-i', '--input', help='Tarball file to read')
    parser.add_argument('--force', action='store_true', help='Force action')
    parser.add_argument('--all', action='store_true', help='Show all images')

    # Registry credentials
    parser.add_argument('--username', default='', help='Registry username')
    parser.add_argument('--password', default='', help='Registry password')
    parser.add_argument('--email', default='', help='Registry email')

    return parser


# Options each action can't run without
REQUIRED = {
    'inspect': ['name'],
    'rmi': ['name'],
    'pull': ['repo'],
    'push': ['name'],
    'import': ['source', 'repo'],
    'build': ['remote'],
    'save': ['name', 'output'],
    'load': ['input'],
    'tag': ['name', 'repo'],
}


def run_cli(argv: Optional[List[str]] = None, out: Optional[BinaryIO] = None) -> int:
    """
    Start CLI application

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    missing = [f"--{opt}" for opt in REQUIRED.get(args.action, []) if not getattr(args, opt)]
    if missing:
        parser.error(f"{args.action} requires {' and '.join(missing)}")

    settings = SettingsManager(args.settings)
    level = logging.DEBUG if args.verbose else settings.get('log_level')
    logging.basicConfig(level=level, format='%(message)s')

    try:
        client = DockerClient(
            base_url=args.host or settings.docker_host() or None,
            timeout=args.timeout or settings.get('timeout')
        )
        cli = ImageCLI(client, out=out)

        if args.action == 'images':
            cli.list_images(all_images=args.all)

        elif args.action == 'inspect':
            cli.inspect(args.name)

        elif args.action == 'rmi':
            cli.remove(args.name)

        elif args.action == 'pull':
            cli.pull(args.repo, registry=args.registry)

        elif args.action == 'push':
            auth = AuthConfiguration(
                username=args.username,
                password=args.password,
                email=args.email
            )
            cli.push(args.name, registry=args.registry, auth=auth)

        elif args.action == 'import':
            stdin = sys.stdin.buffer if args.source == '-' else None
            cli.import_image(args.source, args.repo, input_stream=stdin)

        elif args.action == 'build':
            cli.build(args.remote, name=args.tag, quiet=args.quiet)

        elif args.action == 'save':
            cli.save(args.name, args.output)

        elif args.action == 'load':
            cli.load(args.input)

        elif args.action == 'tag':
            cli.tag(args.name, args.repo, force=args.force)

        elif args.action == 'version':
            cli.version()

    except KeyboardInterrupt:
        logger.info("\n\nInterrupted by user")
        return 130
    except (DockerException, OSError) as e:
        logger.error(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(run_cli())
