from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="arcball-camera",
    version="1.0.0",
    description="Shoemake arcball camera controller producing 4x4 view matrices from pointer input",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Topic :: Multimedia :: Graphics :: 3D Rendering",
    ],
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "Pillow",
        "PyOpenGL",
        "PyGObject",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "arcball-cube-viewer=arcball_camera.viewer:main",
        ],
    },
)
