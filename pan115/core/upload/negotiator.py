"""
Rapid upload negotiation.

Runs the upload-init exchange: the server either already holds the content
(ACCEPTED), wants the bytes (MUST_UPLOAD), or challenges the client to
prove possession by hashing a byte range it picks.
"""
import json
import time
from hashlib import sha1
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlencode

from lz4.block import LZ4BlockError

from ..api.async_client import AsyncAPIClient
from ..api.endpoints import (
    API_UPLOAD_INFO,
    API_UPLOAD_INIT,
    UPLOAD_STATUS_ACCEPTED,
    UPLOAD_STATUS_MUST_UPLOAD,
    UPLOAD_STATUS_SIGN_CHECK,
)
from ..api.errors import check_envelope
from ..crypto import ECDHCipher, SessionCipher, upload_signature, upload_token
from ..exceptions import UploadError, SignatureChallengeExceededError
from ..logging import get_logger
from ..session import CredentialStore
from .models import (
    NegotiationProgress,
    NegotiationState,
    SignatureChallenge,
    UploadDecision,
    UploadInfo,
    UploadInitResult,
)
from .protocols import ContentSource
from .services import FileContentSource, as_content_source

DEFAULT_MAX_SIGNATURE_RETRIES = 2


class RapidUploadNegotiator:
    """
    Hash-based instant upload.
    
    Each negotiation uses a fresh session cipher. The number of answered
    signature challenges is bounded by `max_signature_retries`; one more
    challenge after that raises SignatureChallengeExceededError.
    
    Example:
        >>> negotiator = RapidUploadNegotiator(client, store)
        >>> result = await negotiator.negotiate(
        ...     size, 'a.bin', '0', pre_id, file_id, stream, app_version)
        >>> result.decision
        <UploadDecision.ACCEPTED: 'accepted'>
    """
    
    def __init__(
        self,
        client: AsyncAPIClient,
        store: CredentialStore,
        cipher_factory: Optional[Callable[[], SessionCipher]] = None,
        max_signature_retries: int = DEFAULT_MAX_SIGNATURE_RETRIES
    ):
        """
        Initialize negotiator.
        
        Args:
            client: Async API client
            store: Credential store; upload info is cached per credential
            cipher_factory: Builds the session cipher (defaults to ECDHCipher)
            max_signature_retries: Signature challenges answered before giving up
        """
        if max_signature_retries < 0:
            raise ValueError("max_signature_retries must be >= 0")
        self._client = client
        self._store = store
        self._cipher_factory = cipher_factory or ECDHCipher
        self._max_signature_retries = max_signature_retries
        self._upload_info: Optional[UploadInfo] = None
        self._upload_info_generation = -1
        self._logger = get_logger('pan115.upload')
    
    @property
    def max_signature_retries(self) -> int:
        return self._max_signature_retries
    
    async def get_upload_info(self) -> UploadInfo:
        """
        Get user id and upload key of the current credential.
        
        The value is fetched once per credential.
        """
        generation = self._store.generation
        if self._upload_info is not None and self._upload_info_generation == generation:
            return self._upload_info
        
        response = await self._client.request('GET', API_UPLOAD_INFO, error_cls=UploadError)
        envelope = check_envelope(response, UploadError)
        data = envelope.get('data') if isinstance(envelope.get('data'), dict) else envelope
        try:
            info = UploadInfo(
                user_id=int(data['user_id']),
                user_key=str(data['userkey']).upper()
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UploadError(f"Malformed upload info: {e}") from e
        
        self._upload_info = info
        self._upload_info_generation = generation
        return info
    
    async def negotiate(
        self,
        file_size: int,
        file_name: str,
        dir_id: str,
        pre_id: str,
        file_id: str,
        stream: Any,
        app_version: str
    ) -> UploadInitResult:
        """
        Run the upload-init negotiation.
        
        Args:
            file_size: Content size in bytes
            file_name: Name of the new file
            dir_id: Target directory id
            pre_id: SHA-1 of the first 128 KiB
            file_id: SHA-1 of the whole content
            stream: Content source, path or seekable stream; read only
                to answer signature challenges
            app_version: Client version reported to the server
            
        Returns:
            UploadInitResult with decision ACCEPTED or MUST_UPLOAD
            
        Raises:
            SignatureChallengeExceededError: Challenged beyond the bound
            UploadError: Transport, decode or unexpected status, or content
                that cannot be read when challenged
        """
        info = await self.get_upload_info()
        cipher = self._cipher_factory()
        target = f"U_1_{dir_id}"
        user_id = str(info.user_id)
        
        form: Dict[str, str] = {
            'appid': '0',
            'appversion': app_version,
            'userid': user_id,
            'filename': file_name,
            'filesize': str(file_size),
            'fileid': file_id,
            'preid': pre_id,
            'target': target,
            'sig': upload_signature(user_id, info.user_key, file_id, target),
        }
        opened: List[ContentSource] = []
        try:
            return await self._run(
                cipher, form, stream, opened, info, file_name, file_size, file_id, app_version
            )
        finally:
            for source in opened:
                if source is not stream and isinstance(source, FileContentSource):
                    await source.close()
    
    async def _run(
        self,
        cipher: SessionCipher,
        form: Dict[str, str],
        stream: Any,
        opened: List[ContentSource],
        info: UploadInfo,
        file_name: str,
        file_size: int,
        file_id: str,
        app_version: str
    ) -> UploadInitResult:
        """
        Drive the state machine until the server decides.
    
        The content is only wrapped when the first challenge arrives; the
        wrapped source is appended to ``opened`` so the caller can close it.
        """
        user_id = str(info.user_id)
        progress = NegotiationProgress()
    
        while True:
            progress.state = NegotiationState.SENDING
            progress.attempts += 1
            
            timestamp = int(time.time() * 1000)
            form['t'] = str(timestamp)
            form['token'] = upload_token(
                user_id, file_id, file_size, timestamp, app_version,
                progress.sign_key, progress.sign_val
            )
            if progress.sign_key and progress.sign_val:
                form['sign_key'] = progress.sign_key
                form['sign_val'] = progress.sign_val
            
            data = await self._send(cipher, form, timestamp)
            status = self._status(data)
            
            if status == UPLOAD_STATUS_SIGN_CHECK:
                progress.state = NegotiationState.CHALLENGED
                if progress.challenges >= self._max_signature_retries:
                    raise SignatureChallengeExceededError(
                        f"Signature challenged {progress.challenges + 1} times for {file_name}",
                        progress.attempts,
                        data.get('statuscode')
                    )
                challenge = SignatureChallenge.from_response(data)
                start, end = challenge.byte_range
                self._logger.warning(
                    f"Signature challenge for {file_name}: bytes {challenge.sign_check}"
                )
                if not opened:
                    opened.append(as_content_source(stream))
                block = await opened[0].read_range(start, end)
                progress.sign_key = challenge.sign_key
                progress.sign_val = sha1(block).hexdigest().upper()
                progress.challenges += 1
                continue
            
            if status == UPLOAD_STATUS_ACCEPTED:
                progress.state = NegotiationState.ACCEPTED
                decision = UploadDecision.ACCEPTED
            elif status == UPLOAD_STATUS_MUST_UPLOAD:
                progress.state = NegotiationState.MUST_UPLOAD
                decision = UploadDecision.MUST_UPLOAD
            else:
                raise UploadError(
                    f"Upload init failed: {data.get('statusmsg') or data}",
                    data.get('statuscode')
                )
            
            self._logger.info(
                f"Upload init for {file_name}: {decision.value} after {progress.attempts} attempt(s)"
            )
            return UploadInitResult.from_response(
                decision, data, file_id=file_id, attempts=progress.attempts
            )
    
    async def _send(self, cipher: SessionCipher, form: Dict[str, str], timestamp: int) -> Dict[str, Any]:
        """Send one encrypted upload-init request and open the reply."""
        body = cipher.encrypt(urlencode(sorted(form.items())).encode('utf-8'))
        response = await self._client.send(
            'POST',
            API_UPLOAD_INIT,
            params={'k_ec': cipher.encode_token(timestamp)},
            data=body,
            headers={'Content-Type': 'application/x-www-form-urlencoded'},
            error_cls=UploadError
        )
        try:
            data = json.loads(cipher.decrypt(response.body, decompress=True))
        except (ValueError, IndexError, LZ4BlockError) as e:
            raise UploadError(f"Cannot decode upload init reply: {e}") from e
        if not isinstance(data, dict):
            raise UploadError(f"Unexpected upload init reply: {data!r}")
        return data
    
    @staticmethod
    def _status(data: Dict[str, Any]) -> int:
        try:
            return int(data.get('status'))
        except (TypeError, ValueError) as e:
            raise UploadError(f"Upload init reply without status: {data!r}") from e
