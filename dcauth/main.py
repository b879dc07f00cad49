from dcauth.__version__ import __version__
from dcauth.application import setup_application



app = setup_application(
    title="dcauth",
    description="Directory-backed authentication gateway.",
    version=__version__
)
