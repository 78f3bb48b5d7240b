import sys

import rclpy
from rclpy.clock import Clock, ClockType
from rclpy.executors import ExternalShutdownException
from rclpy.node import Node
from rclpy.qos import qos_profile_sensor_data
from sensor_msgs.msg import Image
from cv_bridge import CvBridge, CvBridgeError

from camera_snapshot.camera import CameraError, open_camera
from camera_snapshot.save_gate import SaveGate
from camera_snapshot.throttle import Throttle


class CameraPublisherNode(Node):
    # Capture at ~30 fps, keep the newest frame on disk once per second
    timer_period = 0.033
    save_interval = 1.0
    save_path = '/tmp/camera_live.jpg'
    topic = 'camera/image_raw'
    frame_id = 'camera_frame'
    log_throttle_period = 1.0

    def __init__(self):
        super().__init__('camera_publisher')
        self.bridge = CvBridge()
        self.throttle = Throttle(self.log_throttle_period)

        try:
            self.camera = open_camera(self.get_logger())
        except CameraError as e:
            self.get_logger().fatal(f'Camera initialisation failed: {e}')
            raise

        self.publisher_ = self.create_publisher(Image, self.topic, qos_profile_sensor_data)
        self.save_gate = SaveGate(self.save_path, self.save_interval, self.now_seconds(),
                                  self.get_logger(), self.throttle)
        # Ticks follow wall time even under use_sim_time
        self.timer = self.create_timer(self.timer_period, self.capture_and_publish,
                                       clock=Clock(clock_type=ClockType.STEADY_TIME))

        self.get_logger().info('Camera publisher node started.')
        self.get_logger().info(f'Saving latest image to: {self.save_path}')
        self.get_logger().info(f'Publishing images on: /{self.topic}')

    def now_seconds(self):
        return self.get_clock().now().nanoseconds / 1e9

    def capture_and_publish(self):
        frame = self.camera.read()
        now = self.get_clock().now()
        now_sec = now.nanoseconds / 1e9

        if frame is None:
            if self.throttle.allow('empty_frame', now_sec):
                self.get_logger().warning('Captured an empty frame, skipping')
            return

        self.save_gate.maybe_save(frame, now_sec)
        self.publish(frame, now)

    def publish(self, frame, now):
        try:
            msg = self.bridge.cv2_to_imgmsg(frame, encoding='bgr8')
        except CvBridgeError as e:
            if self.throttle.allow('publish_failed', now.nanoseconds / 1e9):
                self.get_logger().error(f'Could not convert frame: {e}')
            return
        msg.header.stamp = now.to_msg()
        msg.header.frame_id = self.frame_id
        self.publisher_.publish(msg)

    def destroy_node(self):
        camera = getattr(self, 'camera', None)
        if camera is not None:
            camera.release()
        self.get_logger().info('Camera publisher node closed')
        super().destroy_node()


def main(args=None):
    rclpy.init(args=args)
    try:
        camera_publisher = CameraPublisherNode()
    except CameraError:
        rclpy.try_shutdown()
        sys.exit(1)

    try:
        rclpy.spin(camera_publisher)
    except (KeyboardInterrupt, ExternalShutdownException):
        pass
    finally:
        camera_publisher.destroy_node()
        rclpy.try_shutdown()


if __name__ == '__main__':
    main()
