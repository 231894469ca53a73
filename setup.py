"""
Setup script for the A-level CS Tutor Gemini client
"""

from setuptools import setup, find_packages


# Read README for long description
def read_readme():
    with open('README.md', 'r', encoding='utf-8') as f:
        return f.read()


# Read requirements
def read_requirements():
    with open('requirements.txt', 'r') as f:
        return [line.strip() for line in f
                if line.strip() and not line.startswith('#')]


setup(
    name='cs-tutor-gemini',
    version='1.0.0',
    description='Gemini client layer for an A-level (Cambridge 9618) Computer Science tutor',
    long_description=read_readme(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'tests.*']),
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Education',
        'Topic :: Education',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
    python_requires='>=3.9',
    install_requires=read_requirements(),
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'cs-tutor=cs_tutor.main:main',
        ],
    },
    include_package_data=True,
)
