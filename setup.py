from setuptools import find_packages, setup

# Minimal setup.py to allow pip installation in environments (like p4a) that
# default to legacy builds and need explicit python_requires.

package_list = find_packages(
  include=[
    "entrypoints",
    "entrypoints.*",
    "backend",
    "backend.*",
    "browse_tree",
    "browse_tree.*",
    "playback",
    "playback.*",
    "os_interfaces",
    "os_interfaces.*",
  ]
)

setup(
  name="pxfm",
  version="0.1.0",
  description="Radio station browse tree and single-stream player shell",
  python_requires=">=3.11",
  packages=package_list,
  include_package_data=True,
  install_requires=[
    "fastapi",
    "uvicorn[standard]",
    "pywebview",
    "pyyaml",
    "pydantic>=2",
    "python-dotenv",
    "platformdirs",
    "asgi-correlation-id",
    "slowapi",
  ],
  extras_require={
    "android": ["pyjnius", "cython==3.0.12", "buildozer"],
    "linux": ["python-vlc"],
    "dev": ["pytest", "pytest-asyncio", "pytest-cov", "httpx", "python-vlc"],
  },
  entry_points={
    "console_scripts": [
      "pxfm=entrypoints.radio_app_linux:main",
    ],
  },
)
