import os
from glob import glob
from setuptools import find_packages, setup

package_name = 'camera_snapshot'

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(exclude=['test']),
    data_files=[
        ('share/ament_index/resource_index/packages',
            ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        (os.path.join('share', package_name, 'launch'), glob('launch/*.py')),
    ],
    install_requires=[
        'setuptools',
        'numpy',
        'opencv-python'],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    maintainer='bluspiraat',
    maintainer_email='matthijs.sluijk@gmail.com',
    description='Captures a V4L2 camera, keeps the latest frame on disk and republishes it as sensor_msgs/Image',
    license='Apache-2.0',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'camera_publisher = camera_snapshot.camera_publisher_node:main',
        ],
    },
)
