from launch import LaunchDescription
from launch_ros.actions import Node

def generate_launch_description():
    camera_publisher_node = Node(
        package='camera_snapshot',
        executable='camera_publisher',
        name='camera_publisher',
        output='screen'
    )

    return LaunchDescription([
        camera_publisher_node
    ])
