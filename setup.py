from setuptools import find_packages, setup

setup(
    name='atvremote',
    version='1.0.0',
    description='Android TV / Fire TV remote control over ADB with a self-healing connection',
    author='isantolin',
    author_email='',
    packages=find_packages(include=['atvremote', 'atvremote.*']),
    python_requires='>=3.11',
    install_requires=[
        'msgspec',
        'tenacity',
        'transitions',
        'marshmallow',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
        ],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
)
